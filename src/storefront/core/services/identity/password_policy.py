"""Password policy evaluation."""

import string

from src.storefront.core.exceptions import ErrorDetail
from src.storefront.runtime.config.config_data import PasswordPolicyConfig

_ALPHANUMERIC = frozenset(string.ascii_letters + string.digits)


class PasswordPolicy:
    """Checks a candidate password against the configured identity rules."""

    def __init__(self, config: PasswordPolicyConfig) -> None:
        self._config = config

    def validate(self, password: str) -> list[ErrorDetail]:
        """Return every rule the password violates; empty when it is acceptable."""
        cfg = self._config
        errors: list[ErrorDetail] = []

        if len(password) < cfg.required_length:
            errors.append(
                ErrorDetail(
                    "PasswordTooShort",
                    f"Passwords must be at least {cfg.required_length} characters.",
                )
            )
        if cfg.require_non_alphanumeric and all(ch in _ALPHANUMERIC for ch in password):
            errors.append(
                ErrorDetail(
                    "PasswordRequiresNonAlphanumeric",
                    "Passwords must have at least one non alphanumeric character.",
                )
            )
        if cfg.require_digit and not any(ch in string.digits for ch in password):
            errors.append(
                ErrorDetail(
                    "PasswordRequiresDigit",
                    "Passwords must have at least one digit ('0'-'9').",
                )
            )
        if cfg.require_lowercase and not any(ch in string.ascii_lowercase for ch in password):
            errors.append(
                ErrorDetail(
                    "PasswordRequiresLower",
                    "Passwords must have at least one lowercase ('a'-'z').",
                )
            )
        if cfg.require_uppercase and not any(ch in string.ascii_uppercase for ch in password):
            errors.append(
                ErrorDetail(
                    "PasswordRequiresUpper",
                    "Passwords must have at least one uppercase ('A'-'Z').",
                )
            )
        return errors
