"""Account Schemas — notification preference updates."""

from rentmap.schemas.base import CamelModel


class NotificationPreferencesUpdate(CamelModel):
    """Partial update: omitted flags keep their stored value."""
    updates_saved_properties_email: bool | None = None
    updates_saved_properties_push: bool | None = None
    new_properties_email: bool | None = None
    new_properties_push: bool | None = None
    news_email: bool | None = None
    news_push: bool | None = None
