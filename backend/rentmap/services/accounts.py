"""Accounts — user directory search, account details and notification preferences.

Invariants:
    - User search never returns the caller
    - A user's role is "landlord" iff a landlord profile exists, else "renter"
    - Missing notification preferences read as all-true; updates create the row
"""

import logging
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.domain_types import UserRole
from rentmap.core.errors import ResourceNotFoundError
from rentmap.models.notification_preferences import (
    NotificationPreferences, PREFERENCE_FIELDS,
)
from rentmap.models.user import Customer, Landlord, User
from rentmap.schemas.account import NotificationPreferencesUpdate

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
SEARCH_LIMIT = 20


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


async def search_users(
    db: AsyncSession, caller_id: uuid.UUID, query: str | None,
) -> list[dict]:
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []
    stmt = (
        select(User, Customer, Landlord)
        .join(Customer, Customer.user_id == User.id)
        .outerjoin(Landlord, Landlord.customer_id == Customer.id)
        .where(
            User.id != caller_id,
            or_(
                User.username.icontains(query, autoescape=True),
                Customer.first_name.icontains(query, autoescape=True),
                Customer.last_name.icontains(query, autoescape=True),
            ),
        )
        .limit(SEARCH_LIMIT)
    )
    rows = (await db.execute(stmt)).all()
    return [
        {
            "id": str(user.id),
            "username": user.username,
            "firstName": customer.first_name,
            "lastName": customer.last_name,
            "role": (UserRole.LANDLORD if landlord else UserRole.RENTER).value,
            "businessName": landlord.business_name if landlord else None,
        }
        for user, customer, landlord in rows
    ]


def _preferences_dict(prefs: NotificationPreferences | None) -> dict:
    return {
        _camel(name): getattr(prefs, name) if prefs else True
        for name in PREFERENCE_FIELDS
    }


async def get_account(db: AsyncSession, user_id: uuid.UUID) -> dict:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    prefs = await db.get(NotificationPreferences, user_id)
    customer = user.customer
    return {
        "account": {
            "firstName": customer.first_name if customer else None,
            "lastName": customer.last_name if customer else None,
            "username": user.username,
            "email": user.email,
        },
        "notifications": _preferences_dict(prefs),
    }


async def update_notification_preferences(
    db: AsyncSession, user_id: uuid.UUID, update: NotificationPreferencesUpdate,
) -> dict:
    if await db.get(User, user_id) is None:
        raise ResourceNotFoundError("User", str(user_id))
    prefs = await db.get(NotificationPreferences, user_id)
    if prefs is None:
        prefs = NotificationPreferences(
            user_id=user_id, **{name: True for name in PREFERENCE_FIELDS},
        )
        db.add(prefs)
    for name, value in update.model_dump(exclude_none=True).items():
        setattr(prefs, name, value)
    await db.commit()
    logger.info("Notification preferences updated", extra={"user_id": str(user_id)})
    return _preferences_dict(prefs)
