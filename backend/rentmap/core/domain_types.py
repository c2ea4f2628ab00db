"""Domain Types — enums and identity types shared across the codebase.

Invariants:
    - UserId, PropertyId, ConversationId wrap UUIDs
    - All valid states encoded as Enums, no raw string matching in services

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
PropertyId = NewType("PropertyId", UUID)
ConversationId = NewType("ConversationId", UUID)
MessageId = NewType("MessageId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class PropertyType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    STUDIO = "studio"
    ROOM = "room"
    DUPLEX = "duplex"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    RENTED = "rented"


class SortOption(str, Enum):
    """Ordering of map/catalog search results."""
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"
    NEWEST = "newest"
    OLDEST = "oldest"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"


class ConversationType(str, Enum):
    DIRECT = "direct"
    GROUP = "group"
    SUPPORT = "support"


class ConversationCategory(str, Enum):
    LANDLORD_INQUIRY = "landlord_inquiry"
    TENANT_INQUIRY = "tenant_inquiry"
    RENTAL_APPLICATION = "rental_application"
    MAINTENANCE = "maintenance"
    LEASE_AGREEMENT = "lease_agreement"
    PROPERTY_VIEWING = "property_viewing"
    GENERAL = "general"


class ConversationSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    UNRESPONDED = "unresponded"


class ParticipantRole(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


class MessageType(str, Enum):
    TEXT = "text"


class UserRole(str, Enum):
    """Derived role: a user with a landlord profile is a landlord."""
    LANDLORD = "landlord"
    RENTER = "renter"


class SearchIntent(str, Enum):
    SEARCH = "search"
    FILTER = "filter"
    QUESTION = "question"
    RECOMMENDATION = "recommendation"


class ChatAction(str, Enum):
    SEARCH = "search"
    CHAT = "chat"
