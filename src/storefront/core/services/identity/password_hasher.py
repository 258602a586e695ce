"""Password hashing with bcrypt."""

import base64
import hashlib
import secrets

import bcrypt


class PasswordHasher:
    """Hashes and verifies passwords.

    Passwords are SHA-256 digested and base64 encoded before bcrypt so inputs
    longer than bcrypt's 72-byte limit are neither truncated nor rejected.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds
        self._dummy_hash: str | None = None

    @staticmethod
    def _prehash(password: str) -> bytes:
        return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._prehash(password), salt).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(self._prehash(password), password_hash.encode("ascii"))
        except ValueError:
            # malformed stored hash
            return False

    def verify_dummy(self, password: str) -> bool:
        """Spend the same work as ``verify`` for an account that does not exist."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password, self._dummy_hash)
        return False
