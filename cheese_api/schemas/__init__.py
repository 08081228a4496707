"""Pydantic schemas for API requests and responses."""

from cheese_api.schemas.auth import LoginRequest, TokenResponse
from cheese_api.schemas.cheese_listing import (
    CheeseListingCollectionRead,
    CheeseListingCreate,
    CheeseListingItemRead,
    CheeseListingUpdate,
    listing_view,
)
from cheese_api.schemas.user import PasswordChange, UserCreate, UserRead, UserUpdate, user_view

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "CheeseListingCreate",
    "CheeseListingUpdate",
    "CheeseListingCollectionRead",
    "CheeseListingItemRead",
    "listing_view",
    "UserCreate",
    "UserUpdate",
    "UserRead",
    "PasswordChange",
    "user_view",
]
