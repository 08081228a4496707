"""User model."""

from sqlalchemy import JSON, Column, Integer, String
from sqlalchemy.orm import relationship

from cheese_api.database import Base
from cheese_api.models.enums import Role
from cheese_api.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and listing ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(180), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    stored_roles = Column("roles", JSON, nullable=False, default=list)

    # Relationships
    cheese_listings = relationship(
        "CheeseListing",
        back_populates="owner",
        cascade="all, delete-orphan",
        order_by="CheeseListing.id",
    )

    @property
    def roles(self) -> list[str]:
        """Granted roles; every user has ROLE_USER."""
        roles = list(self.stored_roles or [])
        if Role.USER.value not in roles:
            roles.append(Role.USER.value)
        return roles

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles

    @property
    def iri(self) -> str:
        return f"/api/users/{self.id}"
