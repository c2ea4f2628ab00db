"""Liked Properties — save, list and remove a user's favourite properties.

Invariants:
    - Like and unlike are idempotent (200 both times)
    - Liking an unknown property raises 404; unliking one is a no-op

Design Decisions:
    - No read-before-insert for likes: the unique constraint decides, so two
      concurrent likes of the same property both answer 200
"""

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.errors import ResourceNotFoundError
from rentmap.models.liked_property import LikedProperty
from rentmap.models.property import Property
from rentmap.services.property_search import get_listings_for_properties

logger = logging.getLogger(__name__)

LIKED = "Liked successfully"
ALREADY_LIKED = "Already liked"
UNLIKED = "Unliked successfully"


async def like_property(
    db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID,
) -> str:
    if await db.get(Property, property_id) is None:
        raise ResourceNotFoundError("Property", str(property_id))

    db.add(LikedProperty(user_id=user_id, property_id=property_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        return ALREADY_LIKED
    logger.info(f"Property {property_id} liked", extra={"user_id": str(user_id)})
    return LIKED


async def list_liked_properties(db: AsyncSession, user_id: uuid.UUID) -> list[dict]:
    result = await db.execute(
        select(LikedProperty.property_id).where(LikedProperty.user_id == user_id),
    )
    return await get_listings_for_properties(db, list(result.scalars().all()))


async def unlike_property(
    db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID,
) -> str:
    await db.execute(
        delete(LikedProperty).where(
            LikedProperty.user_id == user_id,
            LikedProperty.property_id == property_id,
        ),
    )
    await db.commit()
    return UNLIKED
