"""Identity services: password policy, hashing and the credential store."""

from .credential_store import CredentialStore
from .password_hasher import PasswordHasher
from .password_policy import PasswordPolicy

__all__ = ["CredentialStore", "PasswordHasher", "PasswordPolicy"]
