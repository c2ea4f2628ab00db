"""Property Search — map filtering, address lookup, model-filter search and landlord contact.

Invariants:
    - Only listings with listing_status == "active" are ever returned by searches
    - Map search returns at most settings.search_page_size pairs; other searches at most 20
    - Address/user substring search is case-insensitive and escapes LIKE wildcards
    - Results serialize as {"property_listings": {...}, "properties": {...}} pairs

Design Decisions:
    - Filters compose as a list of SQLAlchemy clauses joined with and_(): each
      option maps to at most one clause, so unset options cost nothing
    - Serializers live beside the queries so every route shares one wire shape
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentmap.core.domain_types import ListingStatus, SortOption
from rentmap.core.errors import ResourceNotFoundError
from rentmap.models.property import Property, PropertyListing
from rentmap.models.user import Customer, Landlord, User
from rentmap.schemas.filters import FilterOptions, PropertyFilters

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
LOOKUP_LIMIT = 20

_SORT_ORDER = {
    SortOption.PRICE_ASC: (PropertyListing.monthly_rent.asc(),),
    SortOption.PRICE_DESC: (PropertyListing.monthly_rent.desc(),),
    SortOption.NEWEST: (PropertyListing.created_at.desc(),),
    SortOption.OLDEST: (PropertyListing.created_at.asc(),),
    SortOption.BEDROOMS: (Property.bedrooms.desc(), PropertyListing.monthly_rent.asc()),
    SortOption.BATHROOMS: (Property.bathrooms.desc(), PropertyListing.monthly_rent.asc()),
}


# ─── Serialization ──────────────────────────────────────────────

def _money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def serialize_property(prop: Property) -> dict:
    return {
        "id": str(prop.id),
        "landlordId": str(prop.landlord_id) if prop.landlord_id else None,
        "addressLine1": prop.address_line_1,
        "addressLine2": prop.address_line_2,
        "city": prop.city,
        "state": prop.state,
        "zipCode": prop.zip_code,
        "latitude": prop.latitude,
        "longitude": prop.longitude,
        "propertyType": prop.property_type,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "squareFootage": prop.square_footage,
        "parkingSpaces": prop.parking_spaces,
        "petFriendly": prop.pet_friendly,
        "furnished": prop.furnished,
        "utilitiesIncluded": prop.utilities_included,
        "airConditioning": prop.air_conditioning,
        "inUnitLaundry": prop.in_unit_laundry,
    }


def serialize_listing(listing: PropertyListing) -> dict:
    return {
        "id": str(listing.id),
        "propertyId": str(listing.property_id),
        "listingTitle": listing.listing_title,
        "listingDescription": listing.listing_description,
        "monthlyRent": _money(listing.monthly_rent),
        "securityDeposit": _money(listing.security_deposit),
        "availableDate": (
            listing.available_date.isoformat() if listing.available_date else None
        ),
        "leaseType": listing.lease_type,
        "virtualTourUrl": listing.virtual_tour_url,
        "listingStatus": listing.listing_status,
        "createdAt": listing.created_at.isoformat(),
    }


def serialize_listing_pair(listing: PropertyListing, prop: Property) -> dict:
    return {
        "property_listings": serialize_listing(listing),
        "properties": serialize_property(prop),
    }


# ─── Map Filter Search ──────────────────────────────────────────

def build_filter_clauses(options: FilterOptions) -> list:
    """Translate FilterOptions into SQL clauses (listing + property columns)."""
    clauses = [PropertyListing.listing_status == ListingStatus.ACTIVE.value]

    if options.sw_bounds and options.ne_bounds:
        clauses.append(Property.latitude.between(options.sw_bounds.lat, options.ne_bounds.lat))
        clauses.append(Property.longitude.between(options.sw_bounds.lng, options.ne_bounds.lng))

    enabled_types = options.property_types.enabled()
    if enabled_types:
        clauses.append(Property.property_type.in_(enabled_types))

    if options.price_range.min > 0:
        clauses.append(PropertyListing.monthly_rent >= options.price_range.min)
    if options.price_range.max > 0:
        clauses.append(PropertyListing.monthly_rent <= options.price_range.max)

    if options.bedrooms > 0:
        clauses.append(Property.bedrooms >= options.bedrooms)
    if options.bathrooms > 0:
        clauses.append(Property.bathrooms >= options.bathrooms)

    if options.pets_allowed:
        clauses.append(Property.pet_friendly.is_(True))
    if options.furnished:
        clauses.append(Property.furnished.is_(True))
    if options.utilities_included:
        clauses.append(Property.utilities_included.is_(True))
    if options.ac:
        clauses.append(Property.air_conditioning.is_(True))
    if options.in_unit_laundry:
        clauses.append(Property.in_unit_laundry.is_(True))
    if options.parking:
        clauses.append(Property.parking_spaces >= 1)

    if options.lease_type:
        clauses.append(PropertyListing.lease_type == options.lease_type)

    return clauses


async def search_properties_with_filter(
    db: AsyncSession,
    options: FilterOptions,
    sort: SortOption = SortOption.PRICE_ASC,
    limit: int = 100,
) -> list[dict]:
    stmt = (
        select(PropertyListing, Property)
        .join(Property, PropertyListing.property_id == Property.id)
        .where(and_(*build_filter_clauses(options)))
        .order_by(*_SORT_ORDER[sort])
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()
    logger.info(f"Filter search returned {len(rows)} listings (sort={sort.value})")
    return [serialize_listing_pair(listing, prop) for listing, prop in rows]


# ─── Model-Filter Search ────────────────────────────────────────

def build_model_filter_clauses(filters: PropertyFilters) -> list:
    clauses = [PropertyListing.listing_status == ListingStatus.ACTIVE.value]
    if filters.city:
        clauses.append(Property.city.icontains(filters.city, autoescape=True))
    if filters.state:
        clauses.append(Property.state.icontains(filters.state, autoescape=True))
    if filters.property_type:
        clauses.append(Property.property_type == filters.property_type.value)
    if filters.bedrooms is not None:
        clauses.append(Property.bedrooms == filters.bedrooms)
    if filters.bathrooms is not None:
        clauses.append(Property.bathrooms >= filters.bathrooms)
    if filters.square_footage is not None:
        clauses.append(Property.square_footage >= filters.square_footage)
    if filters.parking_spaces is not None:
        clauses.append(Property.parking_spaces >= filters.parking_spaces)
    if filters.price_min is not None:
        clauses.append(PropertyListing.monthly_rent >= filters.price_min)
    if filters.price_max is not None:
        clauses.append(PropertyListing.monthly_rent <= filters.price_max)
    if filters.available_from is not None:
        clauses.append(PropertyListing.available_date >= filters.available_from)
    if filters.pet_friendly:
        clauses.append(Property.pet_friendly.is_(True))
    if filters.furnished:
        clauses.append(Property.furnished.is_(True))
    return clauses


async def search_listings_by_filters(
    db: AsyncSession, filters: PropertyFilters, limit: int = LOOKUP_LIMIT,
) -> list[dict]:
    stmt = (
        select(PropertyListing, Property)
        .join(Property, PropertyListing.property_id == Property.id)
        .where(and_(*build_model_filter_clauses(filters)))
        .order_by(PropertyListing.monthly_rent.asc())
        .limit(limit)
    )
    rows = (await db.execute(stmt)).all()
    return [serialize_listing_pair(listing, prop) for listing, prop in rows]


# ─── Address Search & Landlord Lookup ───────────────────────────

async def search_property_addresses(db: AsyncSession, query: str | None) -> list[dict]:
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []
    columns = (
        Property.address_line_1, Property.address_line_2,
        Property.city, Property.state, Property.zip_code,
    )
    stmt = (
        select(Property)
        .where(or_(*(c.icontains(query, autoescape=True) for c in columns)))
        .limit(LOOKUP_LIMIT)
    )
    properties = (await db.execute(stmt)).scalars().all()
    return [
        {
            "id": str(p.id),
            "addressLine1": p.address_line_1,
            "addressLine2": p.address_line_2,
            "city": p.city,
            "state": p.state,
            "zipCode": p.zip_code,
        }
        for p in properties
    ]


async def get_property_landlord(db: AsyncSession, property_id: uuid.UUID) -> dict:
    """Contact details of the landlord owning a property (404 when none)."""
    stmt = (
        select(Landlord, Customer, User)
        .join(Property, Property.landlord_id == Landlord.id)
        .join(Customer, Landlord.customer_id == Customer.id)
        .join(User, Customer.user_id == User.id)
        .where(Property.id == property_id)
    )
    row = (await db.execute(stmt)).first()
    if row is None:
        raise ResourceNotFoundError("Landlord for property", str(property_id))
    landlord, customer, user = row
    return {
        "landlordId": str(landlord.id),
        "userId": str(user.id),
        "businessName": landlord.business_name,
        "businessPhone": landlord.business_phone,
        "businessEmail": landlord.business_email,
        "firstName": customer.first_name,
        "lastName": customer.last_name,
        "phoneNumber": user.phone_number,
        "userEmail": user.email,
        "username": user.username,
    }


async def get_listings_for_properties(
    db: AsyncSession, property_ids: list[uuid.UUID],
) -> list[dict]:
    if not property_ids:
        return []
    stmt = (
        select(PropertyListing, Property)
        .join(Property, PropertyListing.property_id == Property.id)
        .where(PropertyListing.property_id.in_(property_ids))
        .order_by(PropertyListing.created_at.desc())
    )
    rows = (await db.execute(stmt)).all()
    return [serialize_listing_pair(listing, prop) for listing, prop in rows]
