"""Cheese listing service: lookups, filtering and writes."""

import logging
import re
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Query, Session

from cheese_api.exceptions import ValidationFailed, Violation, violation_from_error
from cheese_api.models.cheese_listing import CheeseListing
from cheese_api.models.user import User
from cheese_api.schemas.cheese_listing import CheeseListingCreate, CheeseListingUpdate

logger = logging.getLogger(__name__)

WriteSchema = TypeVar("WriteSchema", bound=BaseModel)

USER_IRI = re.compile(r"^/api/users/(\d+)$")
BETWEEN = re.compile(r"^\s*(-?\d+)\s*\.\.\s*(-?\d+)\s*$")


@dataclass
class ListingFilters:
    """Collection filters; None means the filter is not applied."""

    is_published: bool | None = None
    title: str | None = None
    description: str | None = None
    owner_email: str | None = None
    price_gt: int | None = None
    price_gte: int | None = None
    price_lt: int | None = None
    price_lte: int | None = None
    price_between: str | None = None


def _contains(column, value: str):
    """Case-insensitive substring match with LIKE wildcards in value escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return column.ilike(f"%{escaped}%", escape="\\")


class CheeseListingService:
    """Service for cheese listing operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, listing_id: int) -> CheeseListing | None:
        return self.db.query(CheeseListing).filter(CheeseListing.id == listing_id).first()

    def apply_filters(self, query: Query, filters: ListingFilters) -> Query:
        """Narrow a listing query by boolean, partial-match and range filters."""
        if filters.is_published is not None:
            query = query.filter(CheeseListing.is_published.is_(filters.is_published))
        if filters.title:
            query = query.filter(_contains(CheeseListing.title, filters.title))
        if filters.description:
            query = query.filter(_contains(CheeseListing.description, filters.description))
        if filters.owner_email:
            query = query.join(CheeseListing.owner).filter(_contains(User.email, filters.owner_email))

        if filters.price_gt is not None:
            query = query.filter(CheeseListing.price > filters.price_gt)
        if filters.price_gte is not None:
            query = query.filter(CheeseListing.price >= filters.price_gte)
        if filters.price_lt is not None:
            query = query.filter(CheeseListing.price < filters.price_lt)
        if filters.price_lte is not None:
            query = query.filter(CheeseListing.price <= filters.price_lte)
        if filters.price_between:
            match = BETWEEN.match(filters.price_between)
            if not match:
                raise ValidationFailed(
                    [Violation("price[between]", 'Expected a range such as "10..20".')]
                )
            low, high = sorted((int(match.group(1)), int(match.group(2))))
            query = query.filter(CheeseListing.price.between(low, high))
        return query

    def search(
        self, filters: ListingFilters, page: int, per_page: int
    ) -> tuple[list[CheeseListing], int]:
        """Return one page of matching listings and the total match count."""
        query = self.apply_filters(self.db.query(CheeseListing), filters)
        total = query.count()
        listings = (
            query.order_by(CheeseListing.id).offset((page - 1) * per_page).limit(per_page).all()
        )
        return listings, total

    def resolve_owner(self, iri: str) -> User:
        """Resolve a user IRI to an existing user or fail validation on owner."""
        match = USER_IRI.match(iri.strip())
        if not match:
            raise ValidationFailed([Violation("owner", f'Invalid IRI "{iri}".')])
        owner = self.db.query(User).filter(User.id == int(match.group(1))).first()
        if owner is None:
            raise ValidationFailed([Violation("owner", f'Item not found for "{iri}".')])
        return owner

    def validate_write(
        self, schema: type[WriteSchema], payload: Any
    ) -> tuple[WriteSchema, User | None]:
        """Validate a write payload and resolve its owner IRI in one pass.

        Schema violations and owner violations are raised together so the client
        sees every failing field at once.
        """
        violations: list[Violation] = []
        data = None
        try:
            data = schema.model_validate(payload)
        except ValidationError as e:
            violations.extend(violation_from_error(error) for error in e.errors())

        owner = None
        owner_iri = payload.get("owner") if isinstance(payload, dict) else None
        if isinstance(owner_iri, str):
            try:
                owner = self.resolve_owner(owner_iri)
            except ValidationFailed as e:
                violations.extend(e.violations)

        if violations:
            raise ValidationFailed(violations)
        return data, owner

    def create(self, data: CheeseListingCreate, owner: User) -> CheeseListing:
        """Create a listing; the description is normalised before storage."""
        listing = CheeseListing(data.title, price=data.price, owner=owner)
        listing.set_text_description(data.description)
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        logger.info(f"Created cheese listing {listing.id} for user {listing.owner_id}")
        return listing

    def update(
        self, listing: CheeseListing, data: CheeseListingUpdate, owner: User | None = None
    ) -> CheeseListing:
        """Apply the writable fields present in data."""
        if owner is not None:
            listing.owner = owner
        if data.title is not None:
            listing.title = data.title
        if data.description is not None:
            listing.set_text_description(data.description)
        if data.price is not None:
            listing.price = data.price

        self.db.commit()
        self.db.refresh(listing)
        logger.info(f"Updated cheese listing {listing.id}")
        return listing

    def delete(self, listing: CheeseListing) -> None:
        listing_id = listing.id
        self.db.delete(listing)
        self.db.commit()
        logger.info(f"Deleted cheese listing {listing_id}")
