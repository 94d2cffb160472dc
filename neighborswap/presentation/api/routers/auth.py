"""API router for account registration and sessions."""

from fastapi import APIRouter, Depends, status

from ....application.services.auth_service import AuthService
from ....core.dependencies import get_auth_service
from ....domain.models import Identity
from ..dependencies import require_identity
from ..schemas.user import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user and start a session."""
    user, token = auth_service.register(
        name=request.name,
        email=request.email,
        phone=request.phone,
        password=request.password,
    )
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Login and get access token."""
    user, token = auth_service.login(request.email, request.password)
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.get("/me", response_model=CurrentUserResponse)
def me(
    identity: Identity = Depends(require_identity),
    auth_service: AuthService = Depends(get_auth_service),
) -> CurrentUserResponse:
    """Get current user profile."""
    user = auth_service.user_for_identity(identity)
    return CurrentUserResponse(user=UserResponse.from_domain(user))
