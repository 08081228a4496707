"""Authentication schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login request."""

    email: str = Field(..., max_length=180)
    password: str = Field(..., max_length=128)


class TokenResponse(BaseModel):
    """JWT token response."""

    token: str
