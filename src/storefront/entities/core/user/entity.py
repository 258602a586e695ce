"""User domain entity."""

from typing import Any

from pydantic import Field

from src.storefront.entities.core._base import Entity


def normalize_email(email: str) -> str:
    """Canonical form used for uniqueness checks and login lookups."""
    return email.strip().lower()


class User(Entity):
    """A registered identity that can log in and receive bearer tokens.

    The password hash is kept out of ``repr`` and is never serialized by the
    API layer; only the credential store reads it.
    """

    email: str = Field(description="Login email address")
    normalized_email: str = Field(description="Lower-cased email used for lookups")
    password_hash: str = Field(repr=False, description="bcrypt hash of the password")

    def __eq__(self, other: Any) -> bool:
        """Compare users by identity attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.normalized_email == other.normalized_email
        )

    def __hash__(self) -> int:
        return hash((self.id, self.normalized_email))
