import time

import pytest
from fastapi import HTTPException

from src.storefront.core.exceptions import UnauthorizedError
from src.storefront.core.services import JwtGeneratorService, JwtVerificationService
from src.storefront.core.services.jwt.jwt_utils import preview_jwt
from src.storefront.entities.core.user import User
from src.storefront.runtime.config.config_data import JWTConfig
from tests.utils import decode_unverified, sign_hs256


class TestJwtGeneration:
    def test_issue_token_claims(
        self,
        jwt_generate_service: JwtGeneratorService,
        secret_for_jwt: str,
        issuer: str,
        audience: str,
    ):
        """Should carry sub, email and the registered claims with a two hour expiry."""
        user = User(email="alice@example.com", normalized_email="alice@example.com", password_hash="x")

        before = int(time.time())
        token = jwt_generate_service.issue_token(user)
        claims = decode_unverified(token, secret_for_jwt)

        assert claims["sub"] == user.id
        assert claims["email"] == "alice@example.com"
        assert claims["iss"] == issuer
        assert claims["aud"] == audience
        assert claims["jti"]
        assert claims["exp"] - claims["iat"] == 7200
        assert before <= claims["iat"] <= int(time.time())
        assert preview_jwt(token).alg == "HS256"

    def test_custom_claims_cannot_override_registered_claims(
        self, jwt_generate_service: JwtGeneratorService, secret_for_jwt: str, issuer: str
    ):
        """Should drop caller-supplied registered claims."""
        token = jwt_generate_service.generate_jwt(
            subject="user-1", claims={"iss": "evil", "role": "admin"}
        )
        claims = decode_unverified(token, secret_for_jwt)
        assert claims["iss"] == issuer
        assert claims["role"] == "admin"

    def test_each_token_gets_a_fresh_jti(
        self, jwt_generate_service: JwtGeneratorService, secret_for_jwt: str
    ):
        """Should give two tokens for the same subject different ids."""
        first = jwt_generate_service.generate_jwt(subject="user-1")
        second = jwt_generate_service.generate_jwt(subject="user-1")
        assert (
            decode_unverified(first, secret_for_jwt)["jti"]
            != decode_unverified(second, secret_for_jwt)["jti"]
        )

    def test_missing_secret_is_server_error(self):
        """Should fail with 500 when no signing key is configured."""
        service = JwtGeneratorService(JWTConfig(secret=None))
        with pytest.raises(HTTPException) as exc_info:
            service.generate_jwt(subject="user-1")
        assert exc_info.value.status_code == 500

    def test_disallowed_algorithm_is_server_error(self):
        """Should refuse to sign with an algorithm outside the allow-list."""
        service = JwtGeneratorService(
            JWTConfig(secret="s", algorithm="HS512", allowed_algorithms=["HS256"])
        )
        with pytest.raises(HTTPException) as exc_info:
            service.generate_jwt(subject="user-1")
        assert exc_info.value.status_code == 500


class TestJwtVerification:
    def test_generate_verify_roundtrip(
        self,
        jwt_generate_service: JwtGeneratorService,
        jwt_verify_service: JwtVerificationService,
        issuer: str,
        audience: str,
    ):
        """Should verify a token it issued and expose structured claims."""
        user = User(email="bob@example.com", normalized_email="bob@example.com", password_hash="x")
        token = jwt_generate_service.issue_token(user)

        claims = jwt_verify_service.verify_jwt(token)

        assert claims.subject == user.id
        assert claims.email == "bob@example.com"
        assert claims.issuer == issuer
        assert claims.audience == audience
        assert claims.expires_at - claims.issued_at == 7200
        assert claims.raw_token == token
        assert claims.jti

    def test_wrong_key_rejected(
        self, jwt_verify_service: JwtVerificationService, issuer: str, audience: str
    ):
        """Should reject a token signed with another key."""
        token = sign_hs256("some-other-key", issuer=issuer, audience=audience)
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_wrong_issuer_rejected(
        self, jwt_verify_service: JwtVerificationService, secret_for_jwt: str, audience: str
    ):
        """Should reject a token from another issuer."""
        token = sign_hs256(secret_for_jwt, issuer="https://other.test", audience=audience)
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_wrong_audience_rejected(
        self, jwt_verify_service: JwtVerificationService, secret_for_jwt: str, issuer: str
    ):
        """Should reject a token for another audience."""
        token = sign_hs256(secret_for_jwt, issuer=issuer, audience="api://other")
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_expired_rejected(
        self,
        jwt_verify_service: JwtVerificationService,
        secret_for_jwt: str,
        issuer: str,
        audience: str,
    ):
        """Should reject an expired token when no clock skew is allowed."""
        token = sign_hs256(
            secret_for_jwt,
            issuer=issuer,
            audience=audience,
            issued_at=int(time.time()) - 7300,
            lifetime=7200,
        )
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_clock_skew_tolerates_recent_expiry(
        self, secret_for_jwt: str, issuer: str, audience: str
    ):
        """Should accept a just-expired token within the configured leeway."""
        service = JwtVerificationService(
            JWTConfig(secret=secret_for_jwt, issuer=issuer, audience=audience, clock_skew=120)
        )
        token = sign_hs256(
            secret_for_jwt,
            issuer=issuer,
            audience=audience,
            issued_at=int(time.time()) - 3630,
            lifetime=3600,
        )
        assert service.verify_jwt(token).subject == "user-123"

    def test_missing_subject_rejected(
        self,
        jwt_verify_service: JwtVerificationService,
        secret_for_jwt: str,
        issuer: str,
        audience: str,
    ):
        """Should require the sub claim."""
        token = sign_hs256(secret_for_jwt, issuer=issuer, audience=audience, subject="")
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_unsigned_token_rejected(self, jwt_verify_service: JwtVerificationService):
        """Should reject alg=none before touching the signature."""
        # {"alg":"none","typ":"JWT"}.{"sub":"x"}.sig
        token = "eyJhbGciOiJub25lIiwidHlwIjoiSldUIn0.eyJzdWIiOiJ4In0.c2ln"
        with pytest.raises(UnauthorizedError, match="Disallowed"):
            jwt_verify_service.verify_jwt(token)

    @pytest.mark.parametrize(
        "token",
        ["", "garbage", "a.b", "a.b.c.d", "a..c", "a.b.c=", "x" * 5000],
    )
    def test_malformed_token_rejected(
        self, jwt_verify_service: JwtVerificationService, token: str
    ):
        """Should reject tokens that are not compact JWS."""
        with pytest.raises(UnauthorizedError):
            jwt_verify_service.verify_jwt(token)

    def test_missing_secret_is_server_error(
        self, jwt_generate_service: JwtGeneratorService
    ):
        """Should fail with 500 when no verification key is configured."""
        token = jwt_generate_service.generate_jwt(subject="user-1")
        service = JwtVerificationService(JWTConfig(secret=None))
        with pytest.raises(HTTPException) as exc_info:
            service.verify_jwt(token)
        assert exc_info.value.status_code == 500
