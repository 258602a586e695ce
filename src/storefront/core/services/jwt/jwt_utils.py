import base64
import json
from dataclasses import dataclass
from typing import Any, Final

from src.storefront.core.exceptions import UnauthorizedError
from src.storefront.core.models.claims import TokenClaims

# ---------------- tunables ----------------
MAX_JWT_CHARS: Final = 4096
MAX_SEGMENT_CHARS: Final = 4096
MAX_HEADER_BYTES: Final = 8 * 1024
_ALLOWED: Final = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_."
)  # no '='


# --------------- one-pass prefilter ---------------
def _prefilter_compact_jwt(token: str) -> tuple[str, str, str]:
    if not token or len(token) > MAX_JWT_CHARS:
        raise UnauthorizedError("Invalid JWT size")
    first = second = -1
    for i, ch in enumerate(token):
        if ch not in _ALLOWED:
            raise UnauthorizedError("Invalid JWT characters")
        if ch == ".":
            if first < 0:
                first = i
            elif second < 0:
                second = i
            else:  # third dot
                raise UnauthorizedError("Invalid JWT format")
    # require exactly two dots and non-empty segments
    if first <= 0 or second - first <= 1 or second >= len(token) - 1:
        raise UnauthorizedError("Invalid JWT format")
    h, p, s = token[:first], token[first + 1 : second], token[second + 1 :]
    if (
        len(h) > MAX_SEGMENT_CHARS
        or len(p) > MAX_SEGMENT_CHARS
        or len(s) > MAX_SEGMENT_CHARS
    ):
        raise UnauthorizedError("Invalid JWT segment size")
    return h, p, s


def _b64url_decode_unpadded(seg: str, what: str, max_bytes: int) -> bytes:
    pad = (-len(seg)) % 4
    try:
        raw = base64.urlsafe_b64decode((seg + "=" * pad).encode("ascii"))
    except ValueError as e:
        raise UnauthorizedError(f"Invalid base64url in {what}") from e
    if len(raw) > max_bytes:
        raise UnauthorizedError(f"{what} too large")
    return raw


def _decode_json_object(raw: bytes, what: str) -> dict[str, Any]:
    try:
        obj = json.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise UnauthorizedError(f"Non-UTF8 {what}") from e
    except json.JSONDecodeError as e:
        raise UnauthorizedError(f"Invalid JSON in {what}") from e
    if not isinstance(obj, dict):
        raise UnauthorizedError(f"{what} must be a JSON object")
    return obj


@dataclass(frozen=True)
class JwtPreview:
    header: dict[str, Any]
    alg: str | None


def preview_jwt(token: str) -> JwtPreview:
    """Check the compact form and decode the header without verifying anything."""
    h_seg, _, _ = _prefilter_compact_jwt(token)
    h_raw = _b64url_decode_unpadded(h_seg, "JWT header", MAX_HEADER_BYTES)
    header = _decode_json_object(h_raw, "JWT header")
    return JwtPreview(header=header, alg=header.get("alg"))


def create_token_claims(token: str, claims: dict[str, Any]) -> TokenClaims:
    """Create a TokenClaims instance from verified JWT claims."""
    remaining_claims = dict(claims)

    return TokenClaims(
        raw_token=token,
        issuer=remaining_claims.pop("iss", ""),
        subject=remaining_claims.pop("sub", ""),
        audience=remaining_claims.pop("aud", []),
        expires_at=remaining_claims.pop("exp"),
        issued_at=remaining_claims.pop("iat"),
        not_before=remaining_claims.pop("nbf", None),
        jti=remaining_claims.pop("jti", None),
        email=remaining_claims.pop("email", None),
    )
