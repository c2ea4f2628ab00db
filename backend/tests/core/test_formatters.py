"""Display Formatters & Query Parsing — renter-facing labels and the flat URL filter form."""

import math

from rentmap.core.filter_extraction import convert_to_filter_options
from rentmap.core.formatters import (
    capitalize_first_letter,
    describe_filters,
    format_bedrooms_and_bathrooms,
    format_large_number,
    format_price,
    format_price_range,
    trim_zeros,
)
from rentmap.core.query_parser import get_filters_from_query


# ─── Prices ─────────────────────────────────────────────────────

def test_format_price():
    assert format_price(2500) == "$2,500"
    assert format_price(1000.5) == "$1,001"
    assert format_price(-1500.4) == "-$1,500"
    assert format_price(None) == "0"
    assert format_price(math.nan) == "0"
    assert format_price(True) == "0"


def test_format_large_number():
    assert format_large_number(2_500_000) == "2.5M"
    assert format_large_number(12_345) == "12.3K"
    assert format_large_number(1_500) == "1.5K"
    assert format_large_number(-2_500) == "-2.5K"
    assert format_large_number(500) == "500"
    assert format_large_number("500") == "0"


def test_format_large_number_rounds_the_binary_value():
    # 1.45 sits just below the half in binary; 1.25 is exact
    assert format_large_number(1450) == "1.4K"
    assert format_large_number(1_250) == "1.3K"
    assert format_large_number(-0.4) == "-0"


def test_non_finite_numbers_fall_back():
    assert format_price(math.inf) == "0"
    assert format_price(-math.inf) == "0"
    assert format_large_number(math.inf) == "0"
    assert format_price_range(1000, math.inf) == "From $1,000"


def test_format_price_range():
    assert format_price_range(1000, 2000) == "$1,000 - $2,000"
    assert format_price_range(1000, None) == "From $1,000"
    assert format_price_range(0, 2000) == "Up to $2,000"
    assert format_price_range() == "Price"


# ─── Rooms & Text ───────────────────────────────────────────────

def test_format_bedrooms_and_bathrooms():
    assert format_bedrooms_and_bathrooms(2, 1.5) == "2+ bd, 1+ ba"
    assert format_bedrooms_and_bathrooms(0, 0) == "Beds & Baths"
    assert format_bedrooms_and_bathrooms(None, 1) == "Beds & Baths"
    assert format_bedrooms_and_bathrooms(-1, 2) == "Beds & Baths"


def test_capitalize_first_letter():
    assert capitalize_first_letter("condo") == "Condo"
    assert capitalize_first_letter("") == ""
    assert capitalize_first_letter(None) == ""
    assert capitalize_first_letter(5) == "5"


def test_trim_zeros():
    assert trim_zeros("2.50") == "2.5"
    assert trim_zeros("3.00") == "3"
    assert trim_zeros("100") == "100"
    assert trim_zeros("1.2.0") == "1.2.0"
    assert trim_zeros(None) == ""


def test_describe_filters():
    filters = convert_to_filter_options({
        "priceRange": {"max": 2000},
        "bedrooms": 2,
        "propertyType": "apartment",
        "petFriendly": True,
    })
    assert describe_filters(filters) == (
        "Up to $2,000, 2+ bd, 0+ ba, Apartment, pets allowed"
    )
    assert describe_filters({}) == "no filters"


# ─── Query String ───────────────────────────────────────────────

def test_query_numbers_parse_from_leading_digits():
    assert get_filters_from_query({"beds": "3br", "minPrice": "abc"}) == {"beds": 3}
    assert get_filters_from_query({"distanceToCampus": ".5"}) == {"distanceToCampus": 0.5}


def test_query_flags_need_literal_true():
    assert get_filters_from_query({"parking": "True", "furnished": "true"}) == {
        "furnished": True,
    }


def test_query_empty_values_are_dropped():
    assert get_filters_from_query({"location": "", "beds": "", "propertyType": "house"}) == {
        "propertyType": "house",
    }
