"""Assistant Conversation Context — per-user memory for the property assistant.

Invariants:
    - In-memory only: lost on restart, never shared between processes
    - The default conversation id for a user is "{user_id}-default"
    - viewed_properties keeps at most 20 ids, oldest dropped first, no duplicates
    - favorite_properties has no duplicates
    - Every mutation bumps updated_at; cleanup_old() drops stale conversations

Design Decisions:
    - Dataclasses mutated in place: the store is the single owner of each object
    - Filters are kept in their FilterOptions wire shape (camelCase dict) so the
      recommendations can be handed straight back to the client
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

MAX_VIEWED_PROPERTIES = 20

_ALL_PROPERTY_TYPE_COUNT = 4

_FEATURE_FLAGS = (
    ("petsAllowed", "Pet Friendly"),
    ("parking", "Parking"),
    ("furnished", "Furnished"),
    ("utilitiesIncluded", "Utilities Included"),
    ("ac", "Air Conditioning"),
    ("inUnitLaundry", "In-Unit Laundry"),
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _has_price(filters: dict | None) -> bool:
    if not filters:
        return False
    price_range = filters.get("priceRange") or {}
    return bool(price_range.get("min") or price_range.get("max"))


def _enabled_types(filters: dict) -> list[str]:
    return [
        name for name, enabled in (filters.get("propertyTypes") or {}).items()
        if enabled
    ]


@dataclass
class UserPreferences:
    price_range: dict | None = None
    location: str | None = None
    property_types: list[str] = field(default_factory=list)
    must_have_features: list[str] = field(default_factory=list)
    deal_breakers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "priceRange": self.price_range,
            "location": self.location,
            "propertyTypes": list(self.property_types),
            "mustHaveFeatures": list(self.must_have_features),
            "dealBreakers": list(self.deal_breakers),
        }


@dataclass
class AssistantConversation:
    id: str
    user_id: str
    messages: list[dict] = field(default_factory=list)
    recent_filters: dict | None = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
    viewed_properties: list[str] = field(default_factory=list)
    favorite_properties: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    def touch(self) -> None:
        self.updated_at = _now()


class ConversationContextStore:
    """Process-local store of assistant conversations keyed by id."""

    def __init__(self):
        self._conversations: dict[str, AssistantConversation] = {}

    def __len__(self) -> int:
        return len(self._conversations)

    def create(self, user_id: str) -> AssistantConversation:
        conversation_id = f"{user_id}-{int(time.time() * 1000)}"
        conversation = AssistantConversation(id=conversation_id, user_id=user_id)
        self._conversations[conversation_id] = conversation
        return conversation

    def get(self, conversation_id: str) -> AssistantConversation | None:
        return self._conversations.get(conversation_id)

    def get_or_create_default(self, user_id: str) -> AssistantConversation:
        default_id = f"{user_id}-default"
        conversation = self._conversations.get(default_id)
        if conversation is None:
            conversation = AssistantConversation(id=default_id, user_id=user_id)
            self._conversations[default_id] = conversation
        return conversation

    def append_message(
        self, conversation_id: str, role: str, content: str,
    ) -> AssistantConversation | None:
        conversation = self.get(conversation_id)
        if conversation is None:
            return None
        conversation.messages.append({
            "role": role, "content": content, "timestamp": _now().isoformat(),
        })
        conversation.touch()
        return conversation

    def update_filters(
        self, conversation_id: str, filters: dict,
    ) -> AssistantConversation | None:
        """Remember the latest filters and fold them into the preferences."""
        conversation = self.get(conversation_id)
        if conversation is None:
            return None
        conversation.recent_filters = filters
        if _has_price(filters):
            conversation.preferences.price_range = dict(filters["priceRange"])
        conversation.preferences.property_types = _enabled_types(filters)
        conversation.touch()
        return conversation

    def add_viewed_property(
        self, conversation_id: str, property_id: str,
    ) -> AssistantConversation | None:
        conversation = self.get(conversation_id)
        if conversation is None:
            return None
        viewed = conversation.viewed_properties
        if property_id not in viewed:
            viewed.append(property_id)
            if len(viewed) > MAX_VIEWED_PROPERTIES:
                del viewed[0]
        conversation.touch()
        return conversation

    def add_favorite_property(
        self, conversation_id: str, property_id: str,
    ) -> AssistantConversation | None:
        conversation = self.get(conversation_id)
        if conversation is None:
            return None
        if property_id not in conversation.favorite_properties:
            conversation.favorite_properties.append(property_id)
        conversation.touch()
        return conversation

    def update_preferences(
        self, conversation_id: str, **preferences,
    ) -> AssistantConversation | None:
        conversation = self.get(conversation_id)
        if conversation is None:
            return None
        for name, value in preferences.items():
            if not hasattr(conversation.preferences, name):
                raise AttributeError(f"Unknown preference: {name}")
            setattr(conversation.preferences, name, value)
        conversation.touch()
        return conversation

    def analyze_patterns(self, conversation_id: str) -> dict:
        """Preferences implied by the most recent filters."""
        conversation = self.get(conversation_id)
        if conversation is None or not conversation.recent_filters:
            return {}
        filters = conversation.recent_filters
        analysis: dict = {}

        if _has_price(filters):
            analysis["preferredPriceRange"] = filters["priceRange"]

        types = _enabled_types(filters)
        if 0 < len(types) < _ALL_PROPERTY_TYPE_COUNT:
            analysis["preferredPropertyTypes"] = types

        features = [label for key, label in _FEATURE_FLAGS if filters.get(key)]
        if features:
            analysis["mustHaveFeatures"] = features
        return analysis

    def summary(self, conversation_id: str) -> dict:
        conversation = self.get(conversation_id)
        if conversation is None:
            return {
                "totalMessages": 0,
                "propertiesViewed": 0,
                "propertiesFavorited": 0,
                "lastActivity": _now().isoformat(),
                "preferences": {},
            }
        return {
            "totalMessages": len(conversation.messages),
            "propertiesViewed": len(conversation.viewed_properties),
            "propertiesFavorited": len(conversation.favorite_properties),
            "lastActivity": conversation.updated_at.isoformat(),
            "preferences": conversation.preferences.to_dict(),
        }

    def contextual_recommendations(self, conversation_id: str) -> dict:
        """Suggested filters, follow-up questions and tips; empty keys omitted."""
        conversation = self.get(conversation_id)
        if conversation is None:
            return {}
        filters = conversation.recent_filters
        prefs = conversation.preferences
        recommendations: dict = {}

        if prefs.price_range and not _has_price(filters):
            recommendations["suggestedFilters"] = {
                **(filters or {}), "priceRange": prefs.price_range,
            }

        questions: list[str] = []
        if not _has_price(filters):
            questions.append("What's your budget range?")
        if not prefs.location:
            questions.append("Which area are you looking in?")
        if (
            filters is not None
            and filters.get("bedrooms") == 0
            and "studio" not in prefs.property_types
        ):
            questions.append("How many bedrooms do you need?")
        if questions:
            recommendations["suggestedQuestions"] = questions

        tips: list[str] = []
        if len(conversation.viewed_properties) > 5:
            tips.append(
                "You've viewed several properties. Would you like me to help "
                "narrow down your search?"
            )
        if conversation.favorite_properties:
            tips.append("Based on your favorite properties, I can suggest similar ones.")
        if tips:
            recommendations["contextualTips"] = tips

        return recommendations

    def cleanup_old(self, max_age_hours: float = 24) -> int:
        """Drop conversations idle longer than max_age_hours; returns the count."""
        cutoff = _now() - timedelta(hours=max_age_hours)
        stale = [
            cid for cid, conversation in self._conversations.items()
            if conversation.updated_at < cutoff
        ]
        for cid in stale:
            del self._conversations[cid]
        return len(stale)


# Singleton (process-local)
context_store = ConversationContextStore()
