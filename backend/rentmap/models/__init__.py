"""ORM Models — SQLAlchemy declarative models for all marketplace entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User ids are the auth provider's ids (no local password storage)

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from rentmap.models.user import User, Customer, Landlord  # noqa: F401
from rentmap.models.notification_preferences import NotificationPreferences  # noqa: F401
from rentmap.models.property import Property, PropertyListing  # noqa: F401
from rentmap.models.liked_property import LikedProperty  # noqa: F401
from rentmap.models.conversation import Conversation, ConversationParticipant  # noqa: F401
from rentmap.models.message import Message  # noqa: F401
