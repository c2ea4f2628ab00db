"""Listing Routes — search by model-produced filters and parse flat query strings."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.query_parser import get_filters_from_query
from rentmap.infrastructure.database import get_db
from rentmap.schemas.filters import PropertyFilters
from rentmap.services.property_search import search_listings_by_filters

router = APIRouter(prefix="/api/v1/listings", tags=["listings"])


@router.post("/search")
async def search_listings(
    body: PropertyFilters, db: AsyncSession = Depends(get_db),
):
    return await search_listings_by_filters(db, body)


@router.get("/query")
async def parse_query(request: Request):
    """Echo the filters a shareable search URL describes."""
    return get_filters_from_query(request.query_params)
