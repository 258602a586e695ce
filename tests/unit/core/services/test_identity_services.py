from unittest.mock import patch

import pytest
from sqlmodel import Session, select

from src.storefront.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from src.storefront.core.services import CredentialStore, PasswordHasher, PasswordPolicy
from src.storefront.entities.core.user import UserTable
from src.storefront.runtime.config.config_data import PasswordPolicyConfig

_GOOD_PASSWORD = "Passw0rd!"


class TestPasswordPolicy:
    def test_compliant_password(self, password_policy: PasswordPolicy):
        """Should accept a password meeting every rule."""
        assert password_policy.validate(_GOOD_PASSWORD) == []

    @pytest.mark.parametrize(
        ("password", "code"),
        [
            ("Pa0!", "PasswordTooShort"),
            ("Password0", "PasswordRequiresNonAlphanumeric"),
            ("Password!", "PasswordRequiresDigit"),
            ("PASSW0RD!", "PasswordRequiresLower"),
            ("passw0rd!", "PasswordRequiresUpper"),
        ],
    )
    def test_single_violation(self, password_policy: PasswordPolicy, password: str, code: str):
        """Should report exactly the violated rule."""
        errors = password_policy.validate(password)
        assert [e.code for e in errors] == [code]
        assert errors[0].description

    def test_all_violations_reported_together(self, password_policy: PasswordPolicy):
        """Should report every violated rule at once."""
        codes = {e.code for e in password_policy.validate("")}
        assert codes == {
            "PasswordTooShort",
            "PasswordRequiresNonAlphanumeric",
            "PasswordRequiresDigit",
            "PasswordRequiresLower",
            "PasswordRequiresUpper",
        }

    def test_disabled_rules_are_skipped(self):
        """Should honour rules switched off in configuration."""
        policy = PasswordPolicy(
            PasswordPolicyConfig(
                required_length=4,
                require_non_alphanumeric=False,
                require_uppercase=False,
            )
        )
        assert policy.validate("abc1") == []


class TestPasswordHasher:
    def test_hash_and_verify(self, password_hasher: PasswordHasher):
        """Should verify the original password and reject others."""
        hashed = password_hasher.hash(_GOOD_PASSWORD)
        assert hashed != _GOOD_PASSWORD
        assert hashed.startswith("$2")
        assert password_hasher.verify(_GOOD_PASSWORD, hashed)
        assert not password_hasher.verify("Wrong-passw0rd", hashed)

    def test_hashes_are_salted(self, password_hasher: PasswordHasher):
        """Should produce a different hash for the same password each time."""
        assert password_hasher.hash(_GOOD_PASSWORD) != password_hasher.hash(_GOOD_PASSWORD)

    def test_long_passwords_are_not_truncated(self, password_hasher: PasswordHasher):
        """Should distinguish passwords differing only after 72 bytes."""
        base = "A1!a" * 20
        hashed = password_hasher.hash(base + "x")
        assert password_hasher.verify(base + "x", hashed)
        assert not password_hasher.verify(base + "y", hashed)

    def test_malformed_hash_does_not_verify(self, password_hasher: PasswordHasher):
        """Should treat a corrupt stored hash as a mismatch."""
        assert not password_hasher.verify(_GOOD_PASSWORD, "not-a-bcrypt-hash")

    def test_dummy_verify_never_matches(self, password_hasher: PasswordHasher):
        """Should run a bcrypt check and still report a mismatch."""
        with patch.object(password_hasher, "verify", wraps=password_hasher.verify) as verify:
            assert password_hasher.verify_dummy(_GOOD_PASSWORD) is False
        verify.assert_called_once()


class TestCredentialStore:
    def test_register_creates_user(self, credential_store: CredentialStore, session: Session):
        """Should persist a user with a hash instead of the plaintext."""
        user = credential_store.register("Alice@Example.com", _GOOD_PASSWORD)

        rows = session.exec(select(UserTable)).all()
        assert len(rows) == 1
        assert rows[0].id == user.id
        assert rows[0].email == "Alice@Example.com"
        assert rows[0].normalized_email == "alice@example.com"
        assert rows[0].password_hash != _GOOD_PASSWORD
        assert user.password_hash not in repr(user)

    def test_register_rejects_weak_password(
        self, credential_store: CredentialStore, session: Session
    ):
        """Should raise ValidationError and create no user."""
        with pytest.raises(ValidationError) as exc_info:
            credential_store.register("bob@example.com", "weak")

        assert exc_info.value.status_code == 400
        codes = {e["code"] for e in exc_info.value.errors}
        assert "PasswordTooShort" in codes
        assert session.exec(select(UserTable)).all() == []

    def test_register_rejects_duplicate_email(
        self, credential_store: CredentialStore, session: Session
    ):
        """Should refuse a second registration, ignoring email case."""
        credential_store.register("carol@example.com", _GOOD_PASSWORD)

        with pytest.raises(ConflictError) as exc_info:
            credential_store.register("CAROL@example.com", "An0ther-pass")

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors[0]["code"] == "DuplicateEmail"
        assert len(session.exec(select(UserTable)).all()) == 1

    def test_authenticate_success(self, credential_store: CredentialStore):
        """Should return the user for correct credentials, case-insensitively."""
        created = credential_store.register("dave@example.com", _GOOD_PASSWORD)

        user = credential_store.authenticate("Dave@Example.com", _GOOD_PASSWORD)

        assert user.id == created.id
        assert user.email == "dave@example.com"

    def test_authenticate_wrong_password(self, credential_store: CredentialStore):
        """Should raise UnauthorizedError for a wrong password."""
        credential_store.register("erin@example.com", _GOOD_PASSWORD)

        with pytest.raises(UnauthorizedError) as exc_info:
            credential_store.authenticate("erin@example.com", "Wr0ng-pass!")
        assert exc_info.value.status_code == 401

    def test_authenticate_unknown_email(self, credential_store: CredentialStore):
        """Should raise UnauthorizedError for an unknown email."""
        with pytest.raises(UnauthorizedError):
            credential_store.authenticate("nobody@example.com", _GOOD_PASSWORD)

    def test_authenticate_unknown_email_still_checks_a_hash(
        self, credential_store: CredentialStore, password_hasher: PasswordHasher
    ):
        """Should spend a bcrypt check on unknown emails like on wrong passwords."""
        with patch.object(password_hasher, "verify", wraps=password_hasher.verify) as verify:
            with pytest.raises(UnauthorizedError):
                credential_store.authenticate("nobody@example.com", _GOOD_PASSWORD)
        verify.assert_called_once()
