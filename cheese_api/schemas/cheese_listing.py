"""Cheese listing schemas and per-operation views."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from cheese_api.models.cheese_listing import CheeseListing
from cheese_api.models.user import User

Operation = Literal["collection", "item"]


class CheeseListingCreate(BaseModel):
    """Create a new cheese listing."""

    title: str = Field(..., min_length=2, max_length=50)
    description: str = Field(..., description="The description of the cheese as raw text.")
    price: int = Field(..., strict=True)
    owner: str = Field(..., description="IRI of the owning user, e.g. /api/users/1")


class CheeseListingUpdate(BaseModel):
    """Update a cheese listing."""

    title: str | None = Field(None, min_length=2, max_length=50)
    description: str | None = None
    price: int | None = Field(None, strict=True)
    owner: str | None = None


class OwnerSummary(BaseModel):
    """Owner details embedded in single listing reads."""

    model_config = ConfigDict(populate_by_name=True)

    iri: str = Field(..., serialization_alias="@id")
    email: str


class CheeseListingCollectionRead(BaseModel):
    """Listing as it appears in collection responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    short_description: str | None = Field(None, serialization_alias="shortDescription")
    price: int
    created_at_ago: str = Field(..., serialization_alias="createdAtAgo")
    owner: str


class CheeseListingItemRead(BaseModel):
    """Listing as it appears in single-resource responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str
    price: int
    created_at_ago: str = Field(..., serialization_alias="createdAtAgo")
    owner: OwnerSummary


class AdminCheeseListingCollectionRead(CheeseListingCollectionRead):
    is_published: bool = Field(..., serialization_alias="isPublished")


class AdminCheeseListingItemRead(CheeseListingItemRead):
    is_published: bool = Field(..., serialization_alias="isPublished")


def listing_view(listing: CheeseListing, operation: Operation, caller: User | None) -> dict:
    """Build the response body for a listing given the operation and who is asking.

    Collection reads carry the short description and the owner IRI; item reads
    carry the full description and embed the owner. Admins also see isPublished.
    """
    is_admin = caller is not None and caller.is_admin
    data = {
        "id": listing.id,
        "title": listing.title,
        "price": listing.price,
        "created_at_ago": listing.created_at_ago,
        "is_published": listing.is_published,
    }

    if operation == "collection":
        schema = AdminCheeseListingCollectionRead if is_admin else CheeseListingCollectionRead
        data["short_description"] = listing.short_description
        data["owner"] = listing.owner.iri
    else:
        schema = AdminCheeseListingItemRead if is_admin else CheeseListingItemRead
        data["description"] = listing.description
        data["owner"] = OwnerSummary(iri=listing.owner.iri, email=listing.owner.email)

    return schema.model_validate(data).model_dump(by_alias=True)
