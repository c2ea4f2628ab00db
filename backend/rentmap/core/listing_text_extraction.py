"""Listing Text Extraction — regex field extraction over OCR'd listing screenshots.

Invariants:
    - Pure functions over plain text; no model call involved
    - Each extractor tries its patterns in order and returns the first hit (or None)
    - Money values are returned without thousands separators ("2,500" -> "2500")
    - Confidence is always within [0.1, 0.95]

Design Decisions:
    - Labelled-form patterns ("City: ...") run before free-text heuristics:
      listing forms and rental sites lay details out as label/value rows
    - Amounts match comma groups first, then whole digit runs, so "$2500" is not
      truncated to a two-digit prefix
"""

import re
from datetime import date

IMAGE_SEPARATOR = "\n\n--- NEW IMAGE ---\n\n"

_MIN_YEAR_BUILT = 1800

_MONEY = r"((?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d{2})?)"

_I = re.IGNORECASE

_PROPERTY_TYPE_PATTERNS = [
    re.compile(r"(?:property\s*type|type)[\s:]*([^\n\r]+)", _I),
    re.compile(r"\b(apartment|apt)\b", _I),
    re.compile(r"\b(house|home)\b", _I),
    re.compile(r"\b(condo|condominium)\b", _I),
    re.compile(r"\b(townhouse|townhome)\b", _I),
    re.compile(r"\b(studio)\b", _I),
    re.compile(r"\b(room)\b", _I),
    re.compile(r"\b(duplex)\b", _I),
]
_PROPERTY_TYPE_ALIASES = {
    "apt": "apartment",
    "home": "house",
    "condominium": "condo",
    "townhome": "townhouse",
}

_BEDROOM_PATTERNS = [
    re.compile(r"(?:bedrooms?|beds?)[\s:]*(\d+)", _I),
    re.compile(r"(\d+)\s*(?:bed|bedroom|br)\b", _I),
    re.compile(r"\b(\d+)\s*bd\b", _I),
    re.compile(r"(\d+)BR", _I),
]
_BATHROOM_PATTERNS = [
    re.compile(r"(?:bathrooms?|baths?)[\s:]*(\d+(?:\.\d+)?)", _I),
    re.compile(r"(\d+(?:\.\d+)?)\s*(?:bath|bathroom|ba)\b", _I),
    re.compile(r"\b(\d+(?:\.\d+)?)\s*ba\b", _I),
    re.compile(r"(\d+(?:\.\d+)?)BA", _I),
]
_SQUARE_FOOTAGE_PATTERNS = [
    re.compile(r"(?:square\s*footage|sqft|sq\.?\s*ft)[\s:]*(\d{1,4}(?:,\d{3})*)", _I),
    re.compile(r"(\d{1,4}(?:,\d{3})*)\s*(?:sq\.?\s*ft|sqft|square\s*feet?)", _I),
    re.compile(r"(\d{1,4}(?:,\d{3})*)\s*ft²", _I),
]
_RENT_PATTERNS = [
    re.compile(rf"(?:monthly\s*rent|rent)[\s:]*\$?{_MONEY}", _I),
    re.compile(rf"\${_MONEY}\s*(?:/?\s*mo|per\s*month|monthly)", _I),
    re.compile(rf"rent[\s:]*\${_MONEY}", _I),
    re.compile(r"\$(\d{3,4}(?:,\d{3})*)"),
]
_ADDRESS_PATTERNS = [
    re.compile(r"(?:address|street\s*address)[\s:]*([^\n\r]+)", _I),
    re.compile(
        r"\d+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|"
        r"Boulevard|Blvd|Way|Place|Pl)\b",
        _I,
    ),
]
_ADDRESS_LINE_1_PATTERNS = [
    re.compile(r"address\s*line\s*1[\s:]*([^\n\r]+)", _I),
    re.compile(r"address\s*1[\s:]*([^\n\r]+)", _I),
]
_ADDRESS_LINE_2_PATTERNS = [
    re.compile(r"address\s*line\s*2[\s:]*([^\n\r]+)", _I),
    re.compile(r"address\s*2[\s:]*([^\n\r]+)", _I),
]
_CITY_PATTERNS = [
    re.compile(r"(?:^|\n|\r).*?city[\s:]*([^\n\r,]+)", _I),
    re.compile(r"•?\s*city[\s:]*([^\n\r,]+)", _I),
    re.compile(r"([A-Za-z\s]+),\s*([A-Z]{2})", _I),
]
_STATE_PATTERNS = [
    re.compile(r"(?:^|\n|\r).*?state[\s:]*([^\n\r,]+)", _I),
    re.compile(r"•?\s*state[\s:]*([^\n\r,]+)", _I),
    re.compile(r"[A-Za-z\s]+,\s*([A-Z]{2})\b", _I),
    re.compile(r"\b([A-Z]{2})\s*\d{5}", _I),
]
_ZIP_PATTERNS = [
    re.compile(r"(?:zip\s*code|postal\s*code|zip)[\s:]*(\d{5}(?:-\d{4})?)", _I),
    re.compile(r"\b(\d{5}(?:-\d{4})?)\b"),
]
_YEAR_BUILT_PATTERNS = [
    re.compile(r"built[\s:]*(\d{4})", _I),
    re.compile(r"year[\s:]*(\d{4})", _I),
    re.compile(r"(\d{4})\s*built", _I),
]
_SECURITY_DEPOSIT_PATTERNS = [
    re.compile(rf"security\s*deposit[\s:]*\${_MONEY}", _I),
    re.compile(rf"deposit[\s:]*\${_MONEY}", _I),
]
_PET_DEPOSIT_PATTERNS = [
    re.compile(rf"pet\s*deposit[\s:]*\${_MONEY}", _I),
    re.compile(rf"pet\s*fee[\s:]*\${_MONEY}", _I),
]
_APPLICATION_FEE_PATTERNS = [
    re.compile(rf"application\s*fee[\s:]*\${_MONEY}", _I),
    re.compile(rf"app\s*fee[\s:]*\${_MONEY}", _I),
]
_TITLE_PATTERN = re.compile(r"(?:listing\s*title|title)[\s:]*([^\n\r]+)", _I)
_DESCRIPTION_PATTERN = re.compile(
    r"(?:description|details)[\s:]*([^\n\r]+(?:\n[^\n\r]+)*)", _I,
)
_LABEL_LINE = re.compile(
    r"^•?\s*(address|city|state|zip|bedrooms|bathrooms|rent|deposit)", _I,
)
_AVAILABLE_DATE_PATTERNS = [
    re.compile(r"(?:available\s*date|availability)[\s:]*([^\n\r]+)", _I),
    re.compile(r"available[\s:]*(\d{1,2}/\d{1,2}/\d{4})", _I),
    re.compile(r"available[\s:]*(\d{4}-\d{2}-\d{2})", _I),
    re.compile(r"move[\s-]?in[\s:]*(\d{1,2}/\d{1,2}/\d{4})", _I),
]
_STRUCTURED_FORMAT = re.compile(
    r"address\s*line\s*[12]|city[\s:]+|state[\s:]+|zip\s*code[\s:]+", _I,
)

AMENITY_KEYWORDS = (
    "parking", "garage", "pool", "gym", "fitness", "laundry", "washer", "dryer",
    "dishwasher", "air conditioning", "ac", "heating", "balcony", "patio",
    "elevator", "doorman", "concierge", "rooftop", "garden", "yard", "deck",
)

# Essential location fields weigh most; total is 124
FIELD_WEIGHTS: dict[str, int] = {
    "addressLine1": 15,
    "city": 15,
    "state": 12,
    "zipCode": 12,
    "addressLine2": 8,
    "address": 8,
    "bedrooms": 8,
    "bathrooms": 6,
    "propertyType": 6,
    "monthlyRent": 8,
    "squareFootage": 4,
    "listingTitle": 6,
    "description": 3,
    "yearBuilt": 2,
    "availableDate": 3,
    "securityDeposit": 2,
    "petDeposit": 2,
    "applicationFee": 2,
    "amenities": 2,
}

STRUCTURED_FORMAT_BONUS = 0.15
COMPLETE_ADDRESS_BONUS = 0.10
PROPERTY_BASICS_BONUS = 0.05
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95


def _first_group(patterns: list[re.Pattern], text: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _amount(patterns: list[re.Pattern], text: str) -> str | None:
    value = _first_group(patterns, text)
    return value.replace(",", "") if value is not None else None


def _stripped(patterns: list[re.Pattern], text: str) -> str | None:
    value = _first_group(patterns, text)
    return value.strip() if value is not None else None


def extract_property_type(text: str) -> str | None:
    value = _first_group(_PROPERTY_TYPE_PATTERNS, text)
    if value is None:
        return None
    value = value.lower().strip()
    return _PROPERTY_TYPE_ALIASES.get(value, value)


def extract_bedrooms(text: str) -> str | None:
    return _first_group(_BEDROOM_PATTERNS, text)


def extract_bathrooms(text: str) -> str | None:
    return _first_group(_BATHROOM_PATTERNS, text)


def extract_square_footage(text: str) -> str | None:
    return _amount(_SQUARE_FOOTAGE_PATTERNS, text)


def extract_rent(text: str) -> str | None:
    return _amount(_RENT_PATTERNS, text)


def extract_address(text: str) -> str | None:
    for pattern in _ADDRESS_PATTERNS:
        match = pattern.search(text)
        if match:
            value = match.group(1) if match.groups() else match.group(0)
            return value.strip()
    return None


def extract_address_line_1(text: str) -> str | None:
    return _stripped(_ADDRESS_LINE_1_PATTERNS, text)


def extract_address_line_2(text: str) -> str | None:
    return _stripped(_ADDRESS_LINE_2_PATTERNS, text)


def extract_city(text: str) -> str | None:
    city = _stripped(_CITY_PATTERNS, text)
    if city is None:
        return None
    return re.sub(r"[.,;:]$", "", city).strip()


def extract_state(text: str) -> str | None:
    state = _stripped(_STATE_PATTERNS, text)
    if state is None:
        return None
    return state.upper() if len(state) == 2 else state


def extract_zip_code(text: str) -> str | None:
    return _first_group(_ZIP_PATTERNS, text)


def extract_year_built(text: str, today: date | None = None) -> str | None:
    current_year = (today or date.today()).year
    for pattern in _YEAR_BUILT_PATTERNS:
        match = pattern.search(text)
        if match and _MIN_YEAR_BUILT <= int(match.group(1)) <= current_year:
            return match.group(1)
    return None


def extract_security_deposit(text: str) -> str | None:
    return _amount(_SECURITY_DEPOSIT_PATTERNS, text)


def extract_pet_deposit(text: str) -> str | None:
    return _amount(_PET_DEPOSIT_PATTERNS, text)


def extract_application_fee(text: str) -> str | None:
    return _amount(_APPLICATION_FEE_PATTERNS, text)


def extract_amenities(text: str) -> list[str]:
    return [
        keyword for keyword in AMENITY_KEYWORDS
        if re.search(rf"\b{re.escape(keyword)}\b", text, _I)
    ]


def extract_title(text: str) -> str | None:
    """Explicit listing title, else one generated from type, bedrooms and city."""
    explicit = _TITLE_PATTERN.search(text)
    if explicit:
        return explicit.group(1).strip()

    property_type = extract_property_type(text)
    bedrooms = extract_bedrooms(text)
    city = extract_city(text)
    if not (property_type or bedrooms or city):
        return None

    parts: list[str] = []
    if bedrooms == "0":
        parts.append("Studio")
    elif bedrooms:
        parts.append(f"{bedrooms}BR")
    if property_type:
        parts.append(property_type[:1].upper() + property_type[1:])
    if city:
        parts.append(f"in {city}")
    return " ".join(parts) or None


def extract_description(text: str) -> str | None:
    explicit = _DESCRIPTION_PATTERN.search(text)
    if explicit:
        return explicit.group(1).strip()

    for line in text.split("\n"):
        stripped = line.strip()
        if len(stripped) > 50 and not _LABEL_LINE.match(stripped):
            return stripped
    return None


def extract_available_date(text: str) -> str | None:
    return _stripped(_AVAILABLE_DATE_PATTERNS, text)


def normalize_ocr_text(text: str) -> str:
    """Unify line endings, collapse blank lines and trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return re.sub(r"\n+", "\n", text).strip()


def _is_present(value) -> bool:
    if value is None:
        return False
    if isinstance(value, list):
        return len(value) > 0
    return bool(str(value).strip())


def score_confidence(data: dict, text: str) -> float:
    total = sum(FIELD_WEIGHTS.values())
    earned = sum(
        weight for field, weight in FIELD_WEIGHTS.items()
        if _is_present(data.get(field))
    )
    confidence = earned / total

    if _STRUCTURED_FORMAT.search(text):
        confidence += STRUCTURED_FORMAT_BONUS
    if all(data.get(f) for f in ("addressLine1", "city", "state", "zipCode")):
        confidence += COMPLETE_ADDRESS_BONUS
    if all(data.get(f) for f in ("bedrooms", "bathrooms", "propertyType")):
        confidence += PROPERTY_BASICS_BONUS

    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))


def extract_property_data(texts: list[str], today: date | None = None) -> dict:
    """Extract listing fields from one or more OCR'd screenshots.

    Fields that could not be found are omitted; `amenities` and
    `confidence` are always present.
    """
    combined = IMAGE_SEPARATOR.join(texts)
    data = {
        "propertyType": extract_property_type(combined),
        "bedrooms": extract_bedrooms(combined),
        "bathrooms": extract_bathrooms(combined),
        "squareFootage": extract_square_footage(combined),
        "monthlyRent": extract_rent(combined),
        "address": extract_address(combined),
        "addressLine1": extract_address_line_1(combined),
        "addressLine2": extract_address_line_2(combined),
        "city": extract_city(combined),
        "state": extract_state(combined),
        "zipCode": extract_zip_code(combined),
        "description": extract_description(combined),
        "listingTitle": extract_title(combined),
        "availableDate": extract_available_date(combined),
        "amenities": extract_amenities(combined),
        "yearBuilt": extract_year_built(combined, today),
        "securityDeposit": extract_security_deposit(combined),
        "petDeposit": extract_pet_deposit(combined),
        "applicationFee": extract_application_fee(combined),
    }
    data = {k: v for k, v in data.items() if v is not None}
    data["confidence"] = score_confidence(data, combined)
    return data
