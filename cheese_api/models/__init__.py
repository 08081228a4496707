"""SQLAlchemy models."""

from cheese_api.models.cheese_listing import CheeseListing
from cheese_api.models.enums import Role
from cheese_api.models.user import User

__all__ = [
    "User",
    "CheeseListing",
    "Role",
]
