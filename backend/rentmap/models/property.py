"""Property & Listing ORM — physical rental units and their market listings.

Invariants:
    - A property belongs to at most one landlord (nullable for imported stock)
    - A listing belongs to exactly one property; only "active" listings are searchable
    - monthly_rent/security_deposit are exact decimals; bathrooms allow halves

Design Decisions:
    - Amenities are boolean columns, not a tag table: the map filters test them directly
    - Listing.property eager-loads (selectin) so search results serialize without
      extra round trips in async context
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    String, Text, Integer, Float, Numeric, Boolean, Date, DateTime, ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rentmap.db.base import Base


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    landlord_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("landlords.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    address_line_1: Mapped[str] = mapped_column(String(255), nullable=False)
    address_line_2: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    property_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="apartment",
    )
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[float] = mapped_column(Float, nullable=False, default=1)
    square_footage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parking_spaces: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pet_friendly: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    furnished: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    utilities_included: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    air_conditioning: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    in_unit_laundry: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


class PropertyListing(Base):
    __tablename__ = "property_listings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    listing_title: Mapped[str | None] = mapped_column(String(200), nullable=True)
    listing_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    security_deposit: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    available_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    lease_type: Mapped[str] = mapped_column(String(20), nullable=False, default="rent")
    virtual_tour_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    listing_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    property: Mapped["Property"] = relationship("Property", lazy="selectin")
