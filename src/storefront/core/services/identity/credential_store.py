"""Credential store: registration and password authentication."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.storefront.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from src.storefront.core.services.identity.password_hasher import PasswordHasher
from src.storefront.core.services.identity.password_policy import PasswordPolicy
from src.storefront.entities.core.user import User, UserRepository, normalize_email


class CredentialStore:
    """Persists user identities and validates their credentials.

    Plaintext passwords only ever reach the hasher; they are never stored and
    never logged.
    """

    def __init__(
        self,
        session: Session,
        hasher: PasswordHasher,
        policy: PasswordPolicy,
    ) -> None:
        self._users = UserRepository(session)
        self._hasher = hasher
        self._policy = policy

    def register(self, email: str, password: str) -> User:
        """Create a new user.

        Raises:
            ValidationError: If the password violates the identity policy.
            ConflictError: If the email is already registered.
        """
        errors = self._policy.validate(password)
        if errors:
            logger.info("Registration rejected by password policy: {}", [e.code for e in errors])
            raise ValidationError(errors)

        normalized = normalize_email(email)
        if self._users.get_by_email(normalized) is not None:
            logger.info("Registration rejected: email already registered")
            raise _duplicate_email(email)

        user = User(
            email=email,
            normalized_email=normalized,
            password_hash=self._hasher.hash(password),
        )
        try:
            created = self._users.add(user)
        except IntegrityError as exc:
            # lost a race with a concurrent registration
            raise _duplicate_email(email) from exc

        logger.info("Registered user {}", created.id)
        return created

    def authenticate(self, email: str, password: str) -> User:
        """Return the user owning ``email`` if ``password`` matches.

        Raises:
            UnauthorizedError: If the email is unknown or the password is wrong.
        """
        user = self._users.get_by_email(email)
        if user is None:
            # keep unknown emails as slow as wrong passwords
            self._hasher.verify_dummy(password)
            logger.info("Authentication failed")
            raise UnauthorizedError("Invalid email or password")
        if not self._hasher.verify(password, user.password_hash):
            logger.info("Authentication failed")
            raise UnauthorizedError("Invalid email or password")
        return user


def _duplicate_email(email: str) -> ConflictError:
    return ConflictError("DuplicateEmail", f"Email '{email}' is already taken.")
