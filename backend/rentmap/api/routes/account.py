"""Account Routes — account details and notification preferences."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.api.dependencies import get_current_user_id
from rentmap.infrastructure.database import get_db
from rentmap.schemas.account import NotificationPreferencesUpdate
from rentmap.services import accounts

router = APIRouter(prefix="/api/v1/account", tags=["account"])


@router.get("")
async def get_account(
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await accounts.get_account(db, user_id)


@router.put("/notifications")
async def update_notifications(
    body: NotificationPreferencesUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return await accounts.update_notification_preferences(db, user_id, body)
