"""Display Formatters — prices, ranges and room counts as shown to renters.

Invariants:
    - Pure functions: never raise on None, NaN or infinity, fall back to "0"
    - Halves round up (1000.5 -> $1,001), matching what the web client shows
    - Decimal places round the exact binary value, so 1.45 (stored as
      1.4499...) gives 1.4 and 1450 compacts to 1.4K
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _to_fixed(value: float, digits: int) -> str:
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_price(num) -> str:
    """Dollar amount with thousands separators, rounded to whole dollars."""
    if not _is_number(num):
        return "0"
    rounded = math.floor(num + 0.5)
    if rounded < 0:
        return f"-${abs(rounded):,}"
    return f"${rounded:,}"


def format_large_number(num) -> str:
    """Compact amount: 2.5M, 12.3K, 500."""
    if not _is_number(num):
        return "0"
    sign = "-" if num < 0 else ""
    magnitude = abs(num)
    if magnitude >= 1_000_000:
        return f"{sign}{_to_fixed(magnitude / 1_000_000, 1)}M"
    if magnitude >= 1_000:
        return f"{sign}{_to_fixed(magnitude / 1_000, 1)}K"
    return _to_fixed(num, 0)


def format_price_range(min_price=None, max_price=None) -> str:
    has_min = _is_number(min_price) and min_price > 0
    has_max = _is_number(max_price) and max_price > 0
    if has_min and has_max:
        return f"{format_price(min_price)} - {format_price(max_price)}"
    if has_min:
        return f"From {format_price(min_price)}"
    if has_max:
        return f"Up to {format_price(max_price)}"
    return "Price"


def format_bedrooms_and_bathrooms(bedrooms=None, bathrooms=None) -> str:
    if bedrooms is None or bathrooms is None:
        return "Beds & Baths"
    beds = math.floor(bedrooms)
    baths = math.floor(bathrooms)
    if beds == 0 and baths == 0:
        return "Beds & Baths"
    if beds >= 0 and baths >= 0:
        return f"{beds}+ bd, {baths}+ ba"
    return "Beds & Baths"


def capitalize_first_letter(value) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        return str(value)
    if not value:
        return ""
    return value[0].upper() + value[1:]


def trim_zeros(value) -> str:
    """Drop trailing fractional zeros from a numeric string ("2.50" -> "2.5")."""
    if value is None:
        return ""
    if not isinstance(value, str):
        return str(value)
    if value.count(".") > 1:
        return value
    if "." in value:
        return re.sub(r"\.?0+$", "", value, count=1)
    return value


def describe_filters(filters: dict) -> str:
    """One-line human summary of a FilterOptions payload."""
    parts: list[str] = []
    price_range = filters.get("priceRange") or {}
    price = format_price_range(price_range.get("min"), price_range.get("max"))
    if price != "Price":
        parts.append(price)

    rooms = format_bedrooms_and_bathrooms(
        filters.get("bedrooms"), filters.get("bathrooms"),
    )
    if rooms != "Beds & Baths":
        parts.append(rooms)

    types = [
        capitalize_first_letter(name)
        for name, enabled in (filters.get("propertyTypes") or {}).items()
        if enabled
    ]
    if types and len(types) < len(filters.get("propertyTypes") or {}):
        parts.append("/".join(types))

    amenity_labels = (
        ("petsAllowed", "pets allowed"),
        ("parking", "parking"),
        ("furnished", "furnished"),
        ("utilitiesIncluded", "utilities included"),
        ("ac", "AC"),
        ("inUnitLaundry", "in-unit laundry"),
    )
    parts.extend(label for key, label in amenity_labels if filters.get(key))
    return ", ".join(parts) if parts else "no filters"
