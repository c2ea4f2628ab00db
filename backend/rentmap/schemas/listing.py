"""Listing Request Schemas — likes and landlord-created listings."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import Field

from rentmap.core.domain_types import ListingStatus, PropertyType
from rentmap.schemas.base import CamelModel


class LikeRequest(CamelModel):
    property_id: UUID


class NewListingRequest(CamelModel):
    """A landlord's property plus its first listing, as the sell form posts them."""
    address_line_1: str = Field(min_length=1, max_length=255)
    address_line_2: str | None = Field(None, max_length=255)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=50)
    zip_code: str = Field(min_length=1, max_length=10)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    property_type: PropertyType = PropertyType.APARTMENT
    bedrooms: int = Field(0, ge=0)
    bathrooms: float = Field(1, ge=0)
    square_footage: int | None = Field(None, gt=0)
    parking_spaces: int = Field(0, ge=0)
    pet_friendly: bool = False
    furnished: bool = False
    utilities_included: bool = False
    air_conditioning: bool = False
    in_unit_laundry: bool = False

    listing_title: str | None = Field(None, max_length=200)
    listing_description: str | None = None
    monthly_rent: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    security_deposit: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    available_date: date | None = None
    lease_type: str = Field("rent", min_length=1, max_length=20)
    virtual_tour_url: str | None = Field(None, max_length=500)
    listing_status: ListingStatus = ListingStatus.ACTIVE
