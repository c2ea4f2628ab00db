"""NotificationPreferences ORM — per-user email/push opt-ins.

Invariants:
    - One row per user (user_id is the primary key)
    - A user without a row is treated as opted in to everything
"""

import uuid

from sqlalchemy import Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from rentmap.db.base import Base

PREFERENCE_FIELDS = (
    "updates_saved_properties_email",
    "updates_saved_properties_push",
    "new_properties_email",
    "new_properties_push",
    "news_email",
    "news_push",
)


class NotificationPreferences(Base):
    __tablename__ = "notification_preferences"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    updates_saved_properties_email: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    updates_saved_properties_push: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    new_properties_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    new_properties_push: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    news_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    news_push: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
