"""Cheese listing API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from cheese_api.api.dependencies import (
    get_cheese_listing_service,
    get_current_user,
    get_optional_user,
    require_admin,
)
from cheese_api.api.formats import (
    negotiate_format,
    parse_properties,
    render,
    select_properties,
)
from cheese_api.config import get_settings
from cheese_api.models.cheese_listing import CheeseListing
from cheese_api.models.user import User
from cheese_api.schemas.cheese_listing import (
    CheeseListingCreate,
    CheeseListingUpdate,
    listing_view,
)
from cheese_api.services.cheese_listing_service import CheeseListingService, ListingFilters

settings = get_settings()

router = APIRouter(prefix="/api", tags=["cheeses"])

ListingService = Annotated[CheeseListingService, Depends(get_cheese_listing_service)]
WritePayload = Annotated[dict[str, Any], Body()]


def json_body(schema: type[BaseModel]) -> dict:
    """Document a raw JSON write payload with the schema it is validated against."""
    content = {"application/json": {"schema": schema.model_json_schema()}}
    return {"requestBody": {"required": True, "content": content}}


def get_listing(service: CheeseListingService, listing_id: int) -> CheeseListing:
    """Get a listing or raise 404."""
    listing = service.get(listing_id)
    if not listing:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return listing


@router.get("/cheeses")
def get_cheeses(
    request: Request,
    service: ListingService,
    caller: Annotated[User | None, Depends(get_optional_user)],
    page: int = Query(default=1, ge=1),
    is_published: bool | None = Query(default=None, alias="isPublished"),
    title: str | None = Query(default=None, description="Partial match on title"),
    description: str | None = Query(default=None, description="Partial match on description"),
    owner_email: str | None = Query(default=None, alias="owner.email"),
    price_gt: int | None = Query(default=None, alias="price[gt]"),
    price_gte: int | None = Query(default=None, alias="price[gte]"),
    price_lt: int | None = Query(default=None, alias="price[lt]"),
    price_lte: int | None = Query(default=None, alias="price[lte]"),
    price_between: str | None = Query(default=None, alias="price[between]"),
) -> Response:
    """List cheese listings, ten per page."""
    media_type = negotiate_format(request)
    filters = ListingFilters(
        is_published=is_published,
        title=title,
        description=description,
        owner_email=owner_email,
        price_gt=price_gt,
        price_gte=price_gte,
        price_lt=price_lt,
        price_lte=price_lte,
        price_between=price_between,
    )
    listings, total = service.search(filters, page, settings.items_per_page)
    properties = parse_properties(request)

    rows = [
        select_properties(listing_view(listing, "collection", caller), properties)
        for listing in listings
    ]
    return render(rows, media_type, title="Cheeses", headers={"X-Total-Count": str(total)})


@router.post(
    "/cheeses",
    status_code=status.HTTP_201_CREATED,
    openapi_extra=json_body(CheeseListingCreate),
)
def create_cheese(
    payload: WritePayload,
    service: ListingService,
    current_user: Annotated[User, Depends(get_current_user)],
) -> JSONResponse:
    """Create a cheese listing (authenticated users only)."""
    listing_data, owner = service.validate_write(CheeseListingCreate, payload)
    listing = service.create(listing_data, owner)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(listing_view(listing, "item", current_user)),
    )


@router.get("/cheeses/{listing_id}")
@router.get("/icheeses/{listing_id}")
def get_cheese(
    listing_id: int,
    request: Request,
    service: ListingService,
    caller: Annotated[User | None, Depends(get_optional_user)],
) -> Response:
    """Get a single cheese listing with owner details."""
    media_type = negotiate_format(request)
    listing = get_listing(service, listing_id)
    data = select_properties(listing_view(listing, "item", caller), parse_properties(request))
    return render(data, media_type, title=listing.title)


@router.put(
    "/cheeses/{listing_id}",
    openapi_extra=json_body(CheeseListingUpdate),
)
def update_cheese(
    listing_id: int,
    payload: WritePayload,
    service: ListingService,
    caller: Annotated[User | None, Depends(get_optional_user)],
) -> JSONResponse:
    """Update the writable fields of a cheese listing."""
    listing = get_listing(service, listing_id)
    listing_data, owner = service.validate_write(CheeseListingUpdate, payload)
    listing = service.update(listing, listing_data, owner)
    return JSONResponse(content=jsonable_encoder(listing_view(listing, "item", caller)))


@router.delete("/cheeses/{listing_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cheese(
    listing_id: int,
    service: ListingService,
    admin: Annotated[User, Depends(require_admin)],
) -> Response:
    """Delete a cheese listing (admins only)."""
    service.delete(get_listing(service, listing_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
