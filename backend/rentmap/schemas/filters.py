"""Filter Schemas — map search options, model-produced filters and parsed queries.

Invariants:
    - A price bound of 0 means "no bound"; bedrooms/bathrooms of 0 mean "any"
    - Bounds filter only when both corners are given
    - Amenity flags constrain only when true; None and False both mean "don't care"

Design Decisions:
    - FilterOptions keeps the client's camelCase names on the wire (CamelModel)
    - PropertyFilters is snake_case: it is the JSON shape the model is asked for
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from rentmap.core.domain_types import PropertyType, SortOption
from rentmap.schemas.base import CamelModel


class GeoPoint(BaseModel):
    lng: float = Field(ge=-180, le=180)
    lat: float = Field(ge=-90, le=90)


class PropertyTypeToggles(BaseModel):
    apartment: bool = False
    house: bool = False
    condo: bool = False
    townhouse: bool = False
    studio: bool = False
    room: bool = False
    duplex: bool = False

    def enabled(self) -> list[str]:
        return [name for name, on in self.model_dump().items() if on]


class PriceRange(BaseModel):
    min: float = Field(0, ge=0)
    max: float = Field(0, ge=0)


class FilterOptions(CamelModel):
    """Structured search constraints sent by the map and catalog views."""
    sw_bounds: GeoPoint | None = None
    ne_bounds: GeoPoint | None = None
    lease_type: str | None = None
    property_types: PropertyTypeToggles = Field(default_factory=PropertyTypeToggles)
    price_range: PriceRange = Field(default_factory=PriceRange)
    bedrooms: float = Field(0, ge=0)
    bathrooms: float = Field(0, ge=0)
    pets_allowed: bool | None = None
    furnished: bool | None = None
    utilities_included: bool | None = None
    parking: bool | None = None
    ac: bool | None = None
    in_unit_laundry: bool | None = None


class FilterSearchRequest(CamelModel):
    filter_options: FilterOptions = Field(default_factory=FilterOptions)
    sort_option: SortOption = SortOption.PRICE_ASC


class PropertyFilters(BaseModel):
    """Filters as produced by the query-to-filter model call."""
    city: str | None = None
    state: str | None = None
    property_type: PropertyType | None = None
    square_footage: int | None = Field(None, ge=0)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: float | None = Field(None, ge=0)
    price_min: float | None = Field(None, ge=0)
    price_max: float | None = Field(None, ge=0)
    parking_spaces: int | None = Field(None, ge=0)
    pet_friendly: bool | None = None
    furnished: bool | None = None
    available_from: date | None = None

    @field_validator("property_type", mode="before")
    @classmethod
    def lowercase_type(cls, v):
        return v.lower() if isinstance(v, str) else v
