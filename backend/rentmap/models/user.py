"""User ORM — auth-provider users plus their customer and landlord profiles.

Invariants:
    - users.id equals the Supabase auth user id (JWT `sub`)
    - A user has at most one customer profile; a customer at most one landlord profile
    - A user is a landlord iff a landlord row hangs off their customer profile
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from rentmap.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    username: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    customer: Mapped[Optional["Customer"]] = relationship(
        "Customer", back_populates="user", uselist=False, lazy="selectin",
    )

    @property
    def landlord(self) -> "Landlord | None":
        return self.customer.landlord if self.customer else None


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True, index=True,
    )
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="customer")
    landlord: Mapped[Optional["Landlord"]] = relationship(
        "Landlord", back_populates="customer", uselist=False, lazy="selectin",
    )


class Landlord(Base):
    __tablename__ = "landlords"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False, unique=True, index=True,
    )
    business_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    business_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    business_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="landlord")
