# tests/unit/test_property_normalize.py

from __future__ import annotations

import pytest

from bridging.core.property import extract_value, normalize_property_summary, normalize_valuation
from tests.utils import property_summary_payload, valuation_payload


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"value": 4, "sourceDate": "2024-01-01"}, 4),
        (3, 3),
        (512.5, 512.5),
        ("house", "house"),
        (None, None),
        ({"sourceDate": "2024-01-01"}, None),
        ([1, 2], None),
    ],
)
def test_extract_value(raw, expected):
    assert extract_value(raw) == expected


def test_summary_unwraps_attributes():
    s = normalize_property_summary(property_summary_payload())

    assert s.property_id == "12345"
    assert s.address.full_address == "1 Example St, Richmond VIC 3121"
    assert s.address.postcode == "3121"
    assert s.attributes.property_type == "house"
    assert s.attributes.bedrooms == 3
    assert s.attributes.bathrooms == 2
    assert s.attributes.car_spaces == 1
    assert s.attributes.land_size == 350.5
    assert s.attributes.floor_plan_size == 180


def test_summary_image_url():
    s = normalize_property_summary(property_summary_payload())
    assert s.image_urls == ["https://insights.proptrack.com/imagery/400x300/abc123/image.jpg"]


def test_summary_without_image():
    s = normalize_property_summary(property_summary_payload(image=None))
    assert s.image_urls == []


@pytest.mark.parametrize(
    "listings, status, expected",
    [
        ([], [], "Off market"),
        ([{"listingId": "1", "priceDescription": "$1.2M", "listingType": "sale"}], [], "For Sale"),
        ([], ["forSale"], "For Sale"),
        ([], ["recentlySold"], "Off market"),
    ],
)
def test_market_status(listings, status, expected):
    s = normalize_property_summary(property_summary_payload(activeListings=listings, marketStatus=status))
    assert s.market_status == expected


def test_missing_attributes_stay_none():
    s = normalize_property_summary(property_summary_payload(attributes={}))
    assert s.attributes.bedrooms is None
    assert s.attributes.land_size is None


def test_valuation():
    v = normalize_valuation(valuation_payload())
    assert v.property_id == "12345"
    assert v.estimated_value == 1_250_000.0
    assert v.lower_range_value == 1_150_000
    assert v.upper_range_value == 1_350_000
    assert v.confidence_level == "HIGH"
    assert v.valuation_date == "2024-06-01"
