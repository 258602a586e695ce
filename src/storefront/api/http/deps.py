"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.exceptions import UnauthorizedError
from src.storefront.core.models.claims import TokenClaims
from src.storefront.core.services import (
    CredentialStore,
    JwtGeneratorService,
    JwtVerificationService,
)
from src.storefront.entities.service.product import ProductRepository


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> Iterator[Session]:
    """Yield a per-request database session, closed after the response."""
    session = app_deps.database_service.get_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_jwt_generation_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtGeneratorService:
    """Get the JWT generation service instance."""
    return app_deps.jwt_generation_service


def get_jwt_verify_service(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> JwtVerificationService:
    """Get the JWT verification service instance."""
    return app_deps.jwt_verify_service


def get_credential_store(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
    db: Session = Depends(get_db_session),
) -> CredentialStore:
    return CredentialStore(db, app_deps.password_hasher, app_deps.password_policy)


def get_product_repository(db: Session = Depends(get_db_session)) -> ProductRepository:
    return ProductRepository(db)


def get_current_claims(
    request: Request,
    jwt_verify: JwtVerificationService = Depends(get_jwt_verify_service),
) -> TokenClaims:
    """Authenticate the request using a Bearer token."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedError("Missing Bearer token")

    token = auth_header.split(" ", 1)[1].strip()
    claims = jwt_verify.verify_jwt(token)

    request.state.claims = claims
    return claims
