"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cheese_api.database import get_db
from cheese_api.schemas.auth import LoginRequest, TokenResponse
from cheese_api.services.auth import create_access_token, get_user_by_email, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login_check", response_model=TokenResponse, name="api_login_check")
def login_check(
    credentials: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Exchange email and password for a one hour bearer token."""
    user = get_user_by_email(db, credentials.email)
    if not user:
        logger.warning("Login attempt for unknown email")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    if not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Bad credentials for user {user.id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bad credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"Issued token for user {user.id}")
    return TokenResponse(token=create_access_token(user.email))
