"""User Routes — people search for starting conversations."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id
from rentmap.infrastructure.database import get_db
from rentmap.services.accounts import search_users

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/search")
async def search(
    q: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await search_users(db, user_id, q)
