"""Password registration and login endpoints."""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from src.storefront.api.http.deps import get_credential_store, get_jwt_generation_service
from src.storefront.core.services import CredentialStore, JwtGeneratorService

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(repr=False)


class LoginRequest(BaseModel):
    email: str
    password: str = Field(repr=False)


class LoginResponse(BaseModel):
    """Bearer token handed out on successful login."""

    token: str


@router.post("/register", response_class=Response)
def register(
    body: RegisterRequest,
    credentials: CredentialStore = Depends(get_credential_store),
) -> Response:
    """Create an account. Policy or duplicate-email failures answer 400."""
    credentials.register(body.email, body.password)
    return Response(status_code=status.HTTP_200_OK)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    credentials: CredentialStore = Depends(get_credential_store),
    jwt_gen: JwtGeneratorService = Depends(get_jwt_generation_service),
) -> LoginResponse:
    """Exchange email and password for a signed bearer token."""
    user = credentials.authenticate(body.email, body.password)
    return LoginResponse(token=jwt_gen.issue_token(user))
