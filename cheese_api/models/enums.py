"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """Role tags granted to users."""

    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"
