"""Token claim models."""

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of verified JWT token claims."""

    raw_token: str = Field(default="", description="Original JWT token")

    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (user ID)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    email: str | None = Field(default=None, description="Email address")
