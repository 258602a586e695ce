"""User repository."""

from src.storefront.core.repositories import Repository

from .entity import User, normalize_email
from .table import UserTable


class UserRepository(Repository[User, UserTable]):
    """Data-access layer for users."""

    entity_type = User
    row_type = UserTable

    def get_by_email(self, email: str) -> User | None:
        matches = self.list(UserTable.normalized_email == normalize_email(email))
        return matches[0] if matches else None
