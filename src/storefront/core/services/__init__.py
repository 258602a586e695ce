"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# Identity Services
from .identity import CredentialStore, PasswordHasher, PasswordPolicy

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

__all__ = [
    # Database Service
    "DbSessionService",
    # Identity Services
    "CredentialStore",
    "PasswordHasher",
    "PasswordPolicy",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
]
