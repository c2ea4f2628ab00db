"""Property Routes — map filter search, address lookup, landlord contact and publishing.

Invariants:
    - /filter is public (map browsing); every other route needs a session
    - Publishing (POST "") is landlord-only
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id
from rentmap.config import get_settings
from rentmap.infrastructure.database import get_db
from rentmap.schemas.filters import FilterSearchRequest
from rentmap.schemas.listing import NewListingRequest
from rentmap.services import landlord_listings, property_search

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.post("/filter")
async def filter_properties(
    body: FilterSearchRequest, db: AsyncSession = Depends(get_db),
):
    """Active listings matching the map filter options."""
    return await property_search.search_properties_with_filter(
        db, body.filter_options, body.sort_option,
        limit=get_settings().search_page_size,
    )


@router.get("/search")
async def search_addresses(
    q: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _user_id: UUID = Depends(get_current_user_id),
):
    return await property_search.search_property_addresses(db, q)


@router.get("/{property_id}/landlord")
async def get_landlord(
    property_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user_id: UUID = Depends(get_current_user_id),
):
    return await property_search.get_property_landlord(db, property_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def publish_listing(
    body: NewListingRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Create a property owned by the caller together with its listing."""
    return await landlord_listings.create_listing(db, user_id, body)
