"""JWT verification service."""

from authlib.jose import JoseError, JsonWebToken
from fastapi import HTTPException
from loguru import logger

from src.storefront.core.exceptions import UnauthorizedError
from src.storefront.core.models.claims import TokenClaims
from src.storefront.core.services.jwt.jwt_utils import create_token_claims, preview_jwt
from src.storefront.runtime.config.config_data import JWTConfig


class JwtVerificationService:
    """Validates bearer tokens issued by ``JwtGeneratorService``.

    A token is accepted only when its algorithm is allow-listed and its
    signature, issuer, audience and expiry all check out against the same
    configured key, issuer and audience.
    """

    def __init__(self, config: JWTConfig) -> None:
        self._config = config
        self._jwt = JsonWebToken(config.allowed_algorithms)

    def verify_jwt(self, token: str) -> TokenClaims:
        cfg = self._config
        pv = preview_jwt(token)

        # alg allowlist
        if pv.alg not in cfg.allowed_algorithms:
            raise UnauthorizedError("Disallowed JWT algorithm")

        if not cfg.secret:
            raise HTTPException(status_code=500, detail="JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "value": cfg.issuer},
            "aud": {"essential": True, "value": cfg.audience},
            "sub": {"essential": True},
            "exp": {"essential": True},
            "iat": {"essential": True},
        }

        try:
            claims = self._jwt.decode(
                token, cfg.secret, claims_options=claims_options
            )
            claims.validate(leeway=cfg.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected bearer token: {}", exc)
            raise UnauthorizedError(f"JWT error: {exc}") from exc

        return create_token_claims(token=token, claims=dict(claims))
