"""Landlord Routes — the caller's own listings (dashboard view)."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id
from rentmap.core.domain_types import ListingStatus
from rentmap.infrastructure.database import get_db
from rentmap.services import landlord_listings

router = APIRouter(prefix="/api/v1/landlord", tags=["landlord"])


@router.get("/listings")
async def my_listings(
    listing_status: ListingStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await landlord_listings.list_landlord_listings(db, user_id, listing_status)
