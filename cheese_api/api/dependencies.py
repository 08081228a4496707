"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cheese_api.database import get_db
from cheese_api.models.user import User
from cheese_api.services.auth import decode_access_token, get_user_by_email
from cheese_api.services.cheese_listing_service import CheeseListingService

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Get the caller from the bearer token, or None for anonymous requests."""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid authentication credentials")

    email = payload.get("email")
    if email is None:
        raise _unauthorized("Invalid authentication credentials")

    user = get_user_by_email(db, email)
    if user is None:
        raise _unauthorized("User not found")

    return user


def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if user is None:
        raise _unauthorized("Not authenticated")
    return user


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Allow only users holding ROLE_ADMIN."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access Denied.",
        )
    return current_user


def get_cheese_listing_service(
    db: Annotated[Session, Depends(get_db)],
) -> CheeseListingService:
    """Get cheese listing service with dependencies."""
    return CheeseListingService(db)
