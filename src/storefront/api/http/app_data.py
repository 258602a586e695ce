from dataclasses import dataclass

from src.storefront.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    PasswordHasher,
    PasswordPolicy,
)
from src.storefront.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    password_hasher: PasswordHasher
    password_policy: PasswordPolicy

    @classmethod
    def from_config(cls, config: ConfigData) -> "ApplicationDependencies":
        """Build the process-wide service set from configuration."""
        return cls(
            config=config,
            database_service=DbSessionService(config.database, config.app.environment),
            jwt_generation_service=JwtGeneratorService(config.jwt),
            jwt_verify_service=JwtVerificationService(config.jwt),
            password_hasher=PasswordHasher(rounds=config.identity.bcrypt_rounds),
            password_policy=PasswordPolicy(config.identity.password),
        )
