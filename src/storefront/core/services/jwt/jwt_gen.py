import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from fastapi import HTTPException
from loguru import logger

from src.storefront.entities.core.user import User
from src.storefront.runtime.config.config_data import JWTConfig

_REGISTERED_CLAIMS = frozenset({"iss", "sub", "aud", "exp", "iat", "nbf", "jti"})


class JwtGeneratorService:
    """Issues signed bearer tokens for authenticated users."""

    def __init__(self, config: JWTConfig) -> None:
        self._config = config

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Issuer, audience, lifetime and key come from the JWT config. Every
        token carries a fresh ``jti``.

        Args:
            subject: Subject (sub) claim - the user ID
            claims: Additional claims. Registered claim names are ignored.

        Returns:
            Signed JWT token string

        Raises:
            HTTPException: If the signing key or algorithm is misconfigured
        """
        cfg = self._config

        secret = cfg.secret
        if not secret:
            raise HTTPException(
                status_code=500, detail="JWT signing secret not configured"
            )

        if cfg.algorithm not in cfg.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {cfg.algorithm}, only {cfg.allowed_algorithms} are allowed"
            )
            raise HTTPException(
                status_code=500, detail=f"Algorithm {cfg.algorithm} not allowed"
            )

        now = int(time.time())

        payload: dict[str, Any] = {
            "iss": cfg.issuer,
            "sub": subject,
            "aud": cfg.audience,
            "exp": now + cfg.expires_in_seconds,
            "iat": now,
            "nbf": now,
            "jti": generate_token(16),
        }

        if claims:
            payload.update(
                {k: v for k, v in claims.items() if k not in _REGISTERED_CLAIMS}
            )

        try:
            header = {"alg": cfg.algorithm, "typ": "JWT"}
            token = jwt.encode(header, payload, secret)
            return token.decode() if isinstance(token, bytes) else token
        except JoseError as e:
            raise HTTPException(
                status_code=500, detail=f"JWT encoding failed: {str(e)}"
            ) from e

    def issue_token(self, user: User) -> str:
        """Issue the access token handed out at login.

        Carries ``sub`` (user id) and ``email`` with the configured issuer,
        audience and absolute lifetime. There is no refresh token.
        """
        return self.generate_jwt(subject=user.id, claims={"email": user.email})
