"""Listing Text Extraction — regex field extraction over OCR'd screenshots.

Tests:
    - Money values keep every digit and drop thousands separators
    - Labelled forms win over free-text heuristics
    - Multiple screenshots combine into one record
    - Confidence stays within [0.1, 0.95]
"""

from datetime import date

import pytest

from rentmap.core.listing_text_extraction import (
    extract_amenities,
    extract_bedrooms,
    extract_city,
    extract_property_data,
    extract_property_type,
    extract_rent,
    extract_security_deposit,
    extract_square_footage,
    extract_state,
    extract_title,
    extract_year_built,
    extract_zip_code,
    normalize_ocr_text,
    score_confidence,
)


def test_rent_keeps_four_digit_amounts():
    assert extract_rent("Rent: $2500/mo") == "2500"


def test_rent_drops_thousands_separator():
    assert extract_rent("$1,850 per month") == "1850"


def test_security_deposit():
    assert extract_security_deposit("Security Deposit: $1,500") == "1500"


def test_square_footage():
    assert extract_square_footage("Spacious 1,200 sq ft unit") == "1200"


def test_property_type_aliases():
    assert extract_property_type("Beautiful condominium downtown") == "condo"
    assert extract_property_type("Property Type: Townhome") == "townhouse"
    assert extract_property_type("nothing useful") is None


def test_bedrooms_label_and_shorthand():
    assert extract_bedrooms("Bedrooms: 3") == "3"
    assert extract_bedrooms("cozy 2bd near park") == "2"


def test_city_state_zip_from_address_line():
    text = "Austin, TX 78701"
    assert extract_city(text) == "Austin"
    assert extract_state(text) == "TX"
    assert extract_zip_code(text) == "78701"


def test_labelled_city_wins():
    assert extract_city("City: Round Rock\nState: TX") == "Round Rock"


def test_year_built_must_be_plausible():
    today = date(2026, 10, 18)
    assert extract_year_built("Built: 1995", today) == "1995"
    assert extract_year_built("Built: 2099", today) is None
    assert extract_year_built("Built: 1700", today) is None


def test_amenities_match_whole_words():
    assert extract_amenities("Pool, gym and a balcony; ACT prep nearby") == [
        "pool", "gym", "balcony",
    ]


def test_title_explicit_or_generated():
    assert extract_title("Listing Title: Sunny loft") == "Sunny loft"
    assert extract_title("3 bedroom house") == "3BR House"
    assert extract_title("???") is None


def test_normalize_ocr_text():
    assert normalize_ocr_text("a\r\n\r\nb\rc\n\n\n") == "a\nb\nc"


def test_empty_text_has_minimum_confidence():
    assert extract_property_data([""]) == {"amenities": [], "confidence": 0.1}


def test_screenshots_combine():
    data = extract_property_data([
        "Address Line 1: 100 Congress Ave\nCity: Austin\nState: TX\nZip Code: 78701",
        "Bedrooms: 2\nBathrooms: 1\nApartment\nRent: $2,500 per month\nparking and pool",
    ], today=date(2026, 10, 18))

    assert data["addressLine1"] == "100 Congress Ave"
    assert data["city"] == "Austin"
    assert data["state"] == "TX"
    assert data["zipCode"] == "78701"
    assert data["bedrooms"] == "2"
    assert data["bathrooms"] == "1"
    assert data["propertyType"] == "apartment"
    assert data["monthlyRent"] == "2500"
    assert data["amenities"] == ["parking", "pool"]
    assert data["confidence"] == 0.95


def test_confidence_floor_and_bonuses():
    assert score_confidence({}, "") == 0.1
    everything = {
        "addressLine1": "1 Main St", "city": "Austin", "state": "TX", "zipCode": "78701",
        "bedrooms": "2", "bathrooms": "1", "propertyType": "house",
    }
    # 74 of 124 field points plus all three bonuses
    assert score_confidence(everything, "City: Austin") == pytest.approx(74 / 124 + 0.30)
