"""Natural-Language Filter Extraction — rule-based parsing of housing search text.

Invariants:
    - Pure functions: no IO, no async, no DB
    - Prices outside 100..50000 are ignored (not plausible monthly rents)
    - Bedroom/bathroom counts outside 0..10 are ignored
    - "studio" always means 0 bedrooms
    - convert_to_filter_options() output matches the FilterOptions wire shape (camelCase)

Design Decisions:
    - Word-boundary matching for keywords: "townhouse" never counts as "house",
      "unfurnished" never counts as "furnished"
    - Comma-grouped numbers matched before plain digit runs so "$2500" is one price
    - Runs before the model call in the property assistant: cheap, deterministic,
      and the result is shown to the model as pre-extracted context
"""

import math
import re

from rentmap.core.domain_types import SearchIntent

_MIN_PLAUSIBLE_RENT = 100
_MAX_PLAUSIBLE_RENT = 50_000
_MAX_ROOMS = 10

# Ordered: first type whose synonym appears wins
_PROPERTY_TYPE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "apartment": ("apartment", "apt", "flat"),
    "house": ("house", "home", "single family", "detached"),
    "condo": ("condo", "condominium"),
    "townhouse": ("townhouse", "townhome", "row house"),
}

_FEATURE_SYNONYMS: dict[str, str] = {
    "pet friendly": "Pet Friendly",
    "pets allowed": "Pet Friendly",
    "pet-friendly": "Pet Friendly",
    "allows pets": "Pet Friendly",
    "dog friendly": "Pet Friendly",
    "cat friendly": "Pet Friendly",
    "parking": "Parking Available",
    "garage": "Garage Parking",
    "laundry": "In-Unit Laundry",
    "washer dryer": "In-Unit Laundry",
    "washer/dryer": "In-Unit Laundry",
    "in-unit laundry": "In-Unit Laundry",
    "air conditioning": "Central AC/Heat",
    "ac": "Central AC/Heat",
    "central air": "Central AC/Heat",
    "heating": "Central AC/Heat",
    "hardwood": "Hardwood Floors",
    "hardwood floors": "Hardwood Floors",
    "fireplace": "Fireplace",
    "balcony": "Balcony",
    "patio": "Patio",
    "yard": "Yard",
    "garden": "Garden",
    "pool": "Pool",
    "gym": "Fitness Center",
    "fitness center": "Fitness Center",
    "dishwasher": "Dishwasher",
    "furnished": "Furnished",
    "unfurnished": "Unfurnished",
}

_PRICE_TOKEN = re.compile(
    r"\$?(\d{1,3}(?:,\d{3})+|\d+(?:\.\d+)?)(\s*k\b|\s*thousand\b)?", re.IGNORECASE,
)
_PRICE_BETWEEN = re.compile(r"\b(?:between|from|range)\b", re.IGNORECASE)
_PRICE_UNDER = re.compile(r"\b(?:under|below|less than|max|maximum)\b", re.IGNORECASE)
_PRICE_OVER = re.compile(r"\b(?:over|above|more than|min|minimum)\b", re.IGNORECASE)
_PRICE_AROUND = re.compile(
    r"\b(?:around|approximately|about|roughly)\b", re.IGNORECASE,
)

_BEDROOMS = re.compile(r"(\d+)\s*(?:bed|bedroom|br)", re.IGNORECASE)
_BATHROOMS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:bath|bathroom|ba)", re.IGNORECASE)
_STUDIO = re.compile(r"\bstudio\b", re.IGNORECASE)

_CITY = re.compile(
    r"\bin\s+([A-Za-z\s]+?)(?:,|\s+(?:CA|California|NY|New York|TX|Texas|FL|Florida)\b)",
    re.IGNORECASE,
)
_NEIGHBORHOOD = re.compile(r"\b(?:near|in|around)\s+([A-Za-z\s]+)", re.IGNORECASE)
_ZIP = re.compile(r"\b\d{5}\b")

_MONTHS = (
    "january|february|march|april|may|june|july|august|"
    "september|october|november|december"
)
_MOVE_IN_PATTERNS: tuple[tuple[re.Pattern, int], ...] = (
    (re.compile(
        r"(?:move in|available|start|beginning)\s+(?:on\s+)?([A-Za-z]+\s+\d{1,2})",
        re.IGNORECASE,
    ), 1),
    (re.compile(
        r"(?:move in|available|start|beginning)\s+(?:on\s+)?(\d{1,2}/\d{1,2})",
        re.IGNORECASE,
    ), 1),
    (re.compile(rf"(?:{_MONTHS})\s+\d{{1,2}}", re.IGNORECASE), 0),
    (re.compile(r"\d{1,2}/\d{1,2}/?\d{0,4}"), 0),
)

_PETS = re.compile(r"\b(?:pets?|dogs?|cats?)\b", re.IGNORECASE)

_SEARCH_SIGNALS = (
    re.compile(r"find|search|look|looking for|show me|need", re.IGNORECASE),
    re.compile(r"apartment|house|condo|townhouse|property|place|rental", re.IGNORECASE),
    re.compile(r"bedroom|bathroom|bed|bath|studio", re.IGNORECASE),
    re.compile(r"\$\d+|\d+\s*k\b", re.IGNORECASE),
)
_QUESTION_SIGNALS = (
    re.compile(r"what|how|when|where|why|can you|is there|do you|does", re.IGNORECASE),
    re.compile(r"\?"),
)
_RECOMMENDATION_SIGNALS = (
    re.compile(r"recommend|suggest|best|good|advice|help", re.IGNORECASE),
    re.compile(r"what do you think|what would you", re.IGNORECASE),
)


def _contains_word(text: str, phrase: str) -> bool:
    """Case-insensitive whole-word (or whole-phrase) match, plural-tolerant."""
    return re.search(
        rf"\b{re.escape(phrase)}s?\b", text, re.IGNORECASE,
    ) is not None


def _price_value(number: str, multiplier: str | None) -> float:
    value = float(number.replace(",", ""))
    if multiplier:
        value *= 1000
    return value


def extract_price_range(text: str) -> dict | None:
    """Extract {min, max} monthly rent from text, or None."""
    prices = [
        _price_value(m.group(1), m.group(2))
        for m in _PRICE_TOKEN.finditer(text)
    ]
    prices = [
        p for p in prices if _MIN_PLAUSIBLE_RENT < p < _MAX_PLAUSIBLE_RENT
    ]
    if not prices:
        return None

    price_range: dict = {}
    if _PRICE_BETWEEN.search(text) and len(prices) >= 2:
        price_range["min"] = min(prices)
        price_range["max"] = max(prices)
    elif _PRICE_UNDER.search(text):
        price_range["max"] = max(prices)
    elif _PRICE_OVER.search(text):
        price_range["min"] = min(prices)
    elif _PRICE_AROUND.search(text):
        price = prices[0]
        # round() first: 2000 * 1.1 is 2200.0000000000005 in binary floating point
        price_range["min"] = math.floor(round(price * 0.9, 6))
        price_range["max"] = math.ceil(round(price * 1.1, 6))
    elif len(prices) == 1:
        # A single bare price reads as a budget ceiling
        price_range["max"] = prices[0]

    return price_range or None


def extract_room_counts(text: str) -> dict:
    """Extract bedrooms/bathrooms; keys present only when found."""
    counts: dict = {}

    bedrooms = _BEDROOMS.search(text)
    if bedrooms:
        value = int(bedrooms.group(1))
        if 0 <= value <= _MAX_ROOMS:
            counts["bedrooms"] = value

    if _STUDIO.search(text):
        counts["bedrooms"] = 0

    bathrooms = _BATHROOMS.search(text)
    if bathrooms:
        value = float(bathrooms.group(1))
        if 0 <= value <= _MAX_ROOMS:
            counts["bathrooms"] = value

    return counts


def extract_property_type(text: str) -> str | None:
    for property_type, synonyms in _PROPERTY_TYPE_SYNONYMS.items():
        if any(_contains_word(text, s) for s in synonyms):
            return property_type
    return None


def extract_features(text: str) -> list[str]:
    """Map amenity phrases to canonical feature names (deduplicated, ordered)."""
    features: list[str] = []
    for phrase, feature in _FEATURE_SYNONYMS.items():
        if _contains_word(text, phrase) and feature not in features:
            features.append(feature)
    return features


def extract_location(text: str) -> str | None:
    city = _CITY.search(text)
    if city:
        return city.group(1).strip()

    neighborhood = _NEIGHBORHOOD.search(text)
    if neighborhood:
        return neighborhood.group(1).strip()

    zip_code = _ZIP.search(text)
    if zip_code:
        return zip_code.group(0)
    return None


def extract_move_in_date(text: str) -> str | None:
    for pattern, group in _MOVE_IN_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(group)
    return None


def extract_filters_from_text(text: str) -> dict:
    """Run every extractor; keys present only when something was found."""
    extracted: dict = {}

    price_range = extract_price_range(text)
    if price_range:
        extracted["priceRange"] = price_range

    extracted.update(extract_room_counts(text))

    property_type = extract_property_type(text)
    if property_type:
        extracted["propertyType"] = property_type

    features = extract_features(text)
    if features:
        extracted["features"] = features

    location = extract_location(text)
    if location:
        extracted["location"] = location

    move_in = extract_move_in_date(text)
    if move_in:
        extracted["moveInDate"] = move_in

    lowered = text.lower()
    if _PETS.search(text):
        extracted["petFriendly"] = True
    if "parking" in lowered or "garage" in lowered:
        extracted["parking"] = True
    if "furnished" in lowered:
        extracted["furnished"] = "unfurnished" not in lowered
    if "utilities included" in lowered or "utilities paid" in lowered:
        extracted["utilitiesIncluded"] = True

    return extracted


def convert_to_filter_options(extracted: dict) -> dict:
    """Translate extracted filters into the FilterOptions wire shape."""
    property_type = extracted.get("propertyType")
    price_range = extracted.get("priceRange") or {}
    features = extracted.get("features") or []

    return {
        "propertyTypes": {
            name: property_type is None or property_type == name
            for name in _PROPERTY_TYPE_SYNONYMS
        },
        "priceRange": {
            "min": price_range.get("min") or 0,
            "max": price_range.get("max") or 0,
        },
        "bedrooms": extracted.get("bedrooms") or 0,
        "bathrooms": extracted.get("bathrooms") or 0,
        "petsAllowed": bool(extracted.get("petFriendly")),
        "furnished": bool(extracted.get("furnished")),
        "utilitiesIncluded": bool(extracted.get("utilitiesIncluded")),
        "parking": bool(extracted.get("parking")),
        "ac": "Central AC/Heat" in features,
        "inUnitLaundry": "In-Unit Laundry" in features,
        "leaseType": "rent",
    }


def analyze_intent(text: str) -> dict:
    """Score search/question/recommendation signals; highest score wins.

    Ties resolve search > recommendation > question.
    """
    search = sum(1 for p in _SEARCH_SIGNALS if p.search(text))
    question = sum(1 for p in _QUESTION_SIGNALS if p.search(text))
    recommendation = sum(1 for p in _RECOMMENDATION_SIGNALS if p.search(text))

    best = max(search, question, recommendation)
    if best == 0:
        return {"type": SearchIntent.QUESTION.value, "confidence": 0.5}
    if search == best:
        return {"type": SearchIntent.SEARCH.value, "confidence": min(search / 3, 1.0)}
    if recommendation == best:
        return {
            "type": SearchIntent.RECOMMENDATION.value,
            "confidence": min(recommendation / 2, 1.0),
        }
    return {"type": SearchIntent.QUESTION.value, "confidence": min(question / 2, 1.0)}


def has_search_criteria(extracted: dict) -> bool:
    """True when the extraction carries something worth querying listings for."""
    return bool(
        extracted.get("priceRange")
        or extracted.get("bedrooms") is not None
        or extracted.get("propertyType")
        or extracted.get("location")
    )
