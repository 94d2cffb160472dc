from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.auth_service import AuthService
from ...core.dependencies import get_auth_service
from ...domain.models import Identity

_bearer_scheme = HTTPBearer(auto_error=False)


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    """Resolve the caller's identity from the bearer token.

    A missing token fails as ``Unauthenticated``; a token that does not verify
    fails as ``InvalidToken``.
    """
    token = credentials.credentials if credentials is not None else None
    return auth_service.require_identity(token)
