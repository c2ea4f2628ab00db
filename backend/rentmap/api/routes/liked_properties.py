"""Liked Property Routes — /api/v1/properties/like (POST, GET, DELETE)."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id
from rentmap.infrastructure.database import get_db
from rentmap.schemas.listing import LikeRequest
from rentmap.services import liked_properties

router = APIRouter(prefix="/api/v1/properties/like", tags=["liked-properties"])


@router.post("")
async def like(
    body: LikeRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    message = await liked_properties.like_property(db, user_id, body.property_id)
    return {"message": message}


@router.get("")
async def list_liked(
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"properties": await liked_properties.list_liked_properties(db, user_id)}


@router.delete("")
async def unlike(
    body: LikeRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    message = await liked_properties.unlike_property(db, user_id, body.property_id)
    return {"message": message}
