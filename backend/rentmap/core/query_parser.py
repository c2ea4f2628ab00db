"""Query-String Filter Parsing — the flat URL form of a listing search.

Invariants:
    - Only keys with a non-empty value appear in the result
    - Numbers parse leniently from a leading numeric prefix ("3br" -> 3); a value
      with no numeric prefix is dropped rather than returned as NaN
    - Boolean flags are set only by the literal string "true"
"""

import re
from collections.abc import Mapping

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")

_STRING_KEYS = ("location", "propertyType", "leaseLength", "moveInDate")
_INT_KEYS = ("beds", "minPrice", "maxPrice")
_FLAG_KEYS = ("petFriendly", "parking", "furnished", "utilitiesIncluded")


def _parse_int(value: str) -> int | None:
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else None


def _parse_float(value: str) -> float | None:
    match = _FLOAT_PREFIX.match(value)
    return float(match.group(1)) if match else None


def get_filters_from_query(query: Mapping[str, str]) -> dict:
    filters: dict = {}

    for key in _STRING_KEYS:
        if query.get(key):
            filters[key] = query[key]

    for key in _INT_KEYS:
        if query.get(key):
            parsed = _parse_int(query[key])
            if parsed is not None:
                filters[key] = parsed

    for key in _FLAG_KEYS:
        if query.get(key) == "true":
            filters[key] = True

    if query.get("distanceToCampus"):
        distance = _parse_float(query["distanceToCampus"])
        if distance is not None:
            filters["distanceToCampus"] = distance

    return filters
