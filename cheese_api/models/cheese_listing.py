"""CheeseListing model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cheese_api.database import Base
from cheese_api.models.mixins import utcnow
from cheese_api.services.text import diff_for_humans, nl2br, truncate


class CheeseListing(Base):
    """A cheese offered for sale by its owner."""

    __tablename__ = "cheese_listings"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # smallest currency unit
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    is_published = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="cheese_listings")

    def __init__(self, title: str | None = None, **kwargs):
        kwargs.setdefault("created_at", utcnow())
        kwargs.setdefault("is_published", False)
        super().__init__(title=title, **kwargs)

    def set_text_description(self, text: str) -> None:
        """Store a raw text description with newlines turned into <br /> markup."""
        self.description = nl2br(text)

    @property
    def short_description(self) -> str | None:
        return truncate(self.description)

    @property
    def created_at_ago(self) -> str:
        """How long ago this listing was added, in words."""
        return diff_for_humans(self.created_at)

    @property
    def iri(self) -> str:
        return f"/api/cheeses/{self.id}"
