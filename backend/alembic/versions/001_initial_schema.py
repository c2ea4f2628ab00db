"""Initial schema — users, profiles, properties, listings, likes, messaging.

Revision ID: 001_initial
Revises: None
Create Date: 2026-09-21

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True),
        nullable=False, server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(64), nullable=True, unique=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        _created_at(),
    )

    op.create_table(
        "customers",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, unique=True, index=True,
        ),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
    )

    op.create_table(
        "landlords",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "customer_id", UUID(as_uuid=True),
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False, unique=True, index=True,
        ),
        sa.Column("business_name", sa.String(200), nullable=True),
        sa.Column("business_phone", sa.String(32), nullable=True),
        sa.Column("business_email", sa.String(255), nullable=True),
    )

    op.create_table(
        "notification_preferences",
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True,
        ),
        *(
            sa.Column(name, sa.Boolean, nullable=False, server_default="true")
            for name in (
                "updates_saved_properties_email",
                "updates_saved_properties_push",
                "new_properties_email",
                "new_properties_push",
                "news_email",
                "news_push",
            )
        ),
    )

    op.create_table(
        "properties",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "landlord_id", UUID(as_uuid=True),
            sa.ForeignKey("landlords.id", ondelete="SET NULL"),
            nullable=True, index=True,
        ),
        sa.Column("address_line_1", sa.String(255), nullable=False),
        sa.Column("address_line_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(50), nullable=False),
        sa.Column("zip_code", sa.String(10), nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("property_type", sa.String(20), nullable=False, server_default="apartment"),
        sa.Column("bedrooms", sa.Integer, nullable=False, server_default="0"),
        sa.Column("bathrooms", sa.Float, nullable=False, server_default="1"),
        sa.Column("square_footage", sa.Integer, nullable=True),
        sa.Column("parking_spaces", sa.Integer, nullable=False, server_default="0"),
        sa.Column("pet_friendly", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("furnished", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("utilities_included", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("air_conditioning", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("in_unit_laundry", sa.Boolean, nullable=False, server_default="false"),
        _created_at(),
    )

    op.create_table(
        "property_listings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "property_id", UUID(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("listing_title", sa.String(200), nullable=True),
        sa.Column("listing_description", sa.Text, nullable=True),
        sa.Column("monthly_rent", sa.Numeric(10, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(10, 2), nullable=True),
        sa.Column("available_date", sa.Date, nullable=True),
        sa.Column("lease_type", sa.String(20), nullable=False, server_default="rent"),
        sa.Column("virtual_tour_url", sa.String(500), nullable=True),
        sa.Column(
            "listing_status", sa.String(20),
            nullable=False, server_default="active", index=True,
        ),
        _created_at(),
    )

    op.create_table(
        "liked_properties",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column(
            "property_id", UUID(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False,
        ),
        _created_at(),
        sa.UniqueConstraint(
            "user_id", "property_id", name="uq_liked_properties_user_property",
        ),
    )

    op.create_table(
        "conversations",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("conversation_type", sa.String(20), nullable=False, server_default="direct"),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column(
            "property_id", UUID(as_uuid=True),
            sa.ForeignKey("properties.id", ondelete="SET NULL"), nullable=True,
        ),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "conversation_participants",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "conversation_id", UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "joined_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
    )

    op.create_table(
        "messages",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "conversation_id", UUID(as_uuid=True),
            sa.ForeignKey("conversations.id", ondelete="CASCADE"),
            nullable=False, index=True,
        ),
        sa.Column(
            "sender_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("message_type", sa.String(20), nullable=False, server_default="text"),
        sa.Column(
            "reply_to_id", UUID(as_uuid=True),
            sa.ForeignKey("messages.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("tags", sa.JSON, nullable=False, server_default="[]"),
        sa.Column("is_edited", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True),
            nullable=False, server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("messages")
    op.drop_table("conversation_participants")
    op.drop_table("conversations")
    op.drop_table("liked_properties")
    op.drop_table("property_listings")
    op.drop_table("properties")
    op.drop_table("notification_preferences")
    op.drop_table("landlords")
    op.drop_table("customers")
    op.drop_table("users")
