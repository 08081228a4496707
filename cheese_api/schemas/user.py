"""User resource schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cheese_api.models.user import User


class UserCreate(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=180)
    password: str = Field(..., min_length=8, max_length=128)


class UserUpdate(BaseModel):
    """Update a user; the password has its own endpoint."""

    email: EmailStr | None = Field(None, max_length=180)


class PasswordChange(BaseModel):
    """Change password request."""

    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword", min_length=8, max_length=128)


class UserRead(BaseModel):
    """User information response."""

    id: int
    email: str
    cheese_listings: list[str] = Field(default_factory=list, serialization_alias="cheeseListings")


class AdminUserRead(UserRead):
    roles: list[str]


def user_view(user: User, caller: User | None) -> dict:
    """Build the response body for a user; roles are only shown to admins."""
    data = {
        "id": user.id,
        "email": user.email,
        "cheese_listings": [listing.iri for listing in user.cheese_listings],
        "roles": user.roles,
    }
    schema = AdminUserRead if caller is not None and caller.is_admin else UserRead
    return schema.model_validate(data).model_dump(by_alias=True)
