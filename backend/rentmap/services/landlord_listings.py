"""Landlord Listings — publish a property with its listing and list a landlord's own stock.

Invariants:
    - Only users with a landlord profile may publish or list (403 otherwise)
    - A new property is always owned by the caller's landlord profile
    - Property and listing are written in one commit: both or neither
    - The landlord view returns every status, the search routes only "active"
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.domain_types import ListingStatus
from rentmap.core.errors import ErrorContext, PermissionDeniedError
from rentmap.models.property import Property, PropertyListing
from rentmap.models.user import Customer, Landlord
from rentmap.schemas.listing import NewListingRequest
from rentmap.services.property_search import serialize_listing_pair

logger = logging.getLogger(__name__)

_PROPERTY_FIELDS = (
    "address_line_1", "address_line_2", "city", "state", "zip_code",
    "latitude", "longitude", "bedrooms", "bathrooms", "square_footage",
    "parking_spaces", "pet_friendly", "furnished", "utilities_included",
    "air_conditioning", "in_unit_laundry",
)
_LISTING_FIELDS = (
    "listing_title", "listing_description", "monthly_rent", "security_deposit",
    "available_date", "lease_type", "virtual_tour_url",
)


async def require_landlord_id(db: AsyncSession, user_id: uuid.UUID) -> uuid.UUID:
    result = await db.execute(
        select(Landlord.id)
        .join(Customer, Landlord.customer_id == Customer.id)
        .where(Customer.user_id == user_id),
    )
    landlord_id = result.scalar_one_or_none()
    if landlord_id is None:
        raise PermissionDeniedError(
            "Landlord profile required", ErrorContext(user_id=str(user_id)),
        )
    return landlord_id


def _default_title(body: NewListingRequest) -> str:
    return f"{body.property_type.value.title()} in {body.city}"


async def create_listing(
    db: AsyncSession, user_id: uuid.UUID, body: NewListingRequest,
) -> dict:
    landlord_id = await require_landlord_id(db, user_id)

    prop = Property(
        landlord_id=landlord_id,
        property_type=body.property_type.value,
        **{field: getattr(body, field) for field in _PROPERTY_FIELDS},
    )
    db.add(prop)
    await db.flush()

    listing = PropertyListing(
        property_id=prop.id,
        listing_status=body.listing_status.value,
        **{field: getattr(body, field) for field in _LISTING_FIELDS},
    )
    if not listing.listing_title:
        listing.listing_title = _default_title(body)
    db.add(listing)
    await db.commit()

    logger.info(
        f"Listing {listing.id} published for property {prop.id}",
        extra={"user_id": str(user_id)},
    )
    return serialize_listing_pair(listing, prop)


async def list_landlord_listings(
    db: AsyncSession, user_id: uuid.UUID, status: ListingStatus | None = None,
) -> list[dict]:
    """The caller's listings across all statuses, newest first."""
    landlord_id = await require_landlord_id(db, user_id)
    stmt = (
        select(PropertyListing, Property)
        .join(Property, PropertyListing.property_id == Property.id)
        .where(Property.landlord_id == landlord_id)
        .order_by(PropertyListing.created_at.desc())
    )
    if status is not None:
        stmt = stmt.where(PropertyListing.listing_status == status.value)
    rows = (await db.execute(stmt)).all()
    return [serialize_listing_pair(listing, prop) for listing, prop in rows]
