"""Authentication middleware."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.access import Principal
from ..security import get_principal_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication.

    Resolves the bearer token to a Principal and keeps the raw token on
    ``request.state.access_token`` so logout can blacklist it.
    """

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> Principal:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authorization code"
            )

        if credentials.scheme.lower() != "bearer":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Invalid authentication scheme"
            )

        principal = await get_principal_from_token(credentials.credentials)
        if not principal:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.access_token = credentials.credentials
        return principal


jwt_bearer = JWTBearer()


# Dependency for getting the acting principal from JWT
async def get_current_principal(principal: Principal = Depends(jwt_bearer)) -> Principal:
    """Get current authenticated principal (user id and email)."""
    return principal
