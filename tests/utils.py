import time
from typing import Any

from authlib.jose import jwt


def sign_hs256(
    secret: str,
    *,
    subject: str = "user-123",
    issuer: str,
    audience: str,
    lifetime: int = 3600,
    issued_at: int | None = None,
    **extra: Any,
) -> str:
    """Sign a token by hand, bypassing JwtGeneratorService."""
    now = int(time.time()) if issued_at is None else issued_at
    payload = {
        "iss": issuer,
        "aud": audience,
        "sub": subject,
        "iat": now,
        "nbf": now,
        "exp": now + lifetime,
        **extra,
    }
    token = jwt.encode({"alg": "HS256", "typ": "JWT"}, payload, secret)
    return token.decode("ascii")


def decode_unverified(token: str, secret: str) -> dict[str, Any]:
    """Decode claims with the signing key but without claim validation."""
    return dict(jwt.decode(token, secret))
