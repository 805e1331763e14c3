# bridging/core/property/normalize.py
"""
Normalise raw property-data payloads into PropertySummary / PropertyValuation.

Attributes arrive wrapped as {"value": ..., "sourceDate": ...}; extract_value()
unwraps them. Missing attributes stay None.
"""

from __future__ import annotations

from typing import Any

from bridging.schemas.models import PropertyAddress, PropertyAttributes, PropertySummary, PropertyValuation

IMAGE_URL_TEMPLATE = "https://insights.proptrack.com/imagery/{size}/{sha}/image.{ext}"
IMAGE_SIZE = "400x300"


def extract_value(raw: Any) -> Any:
    """Plain numbers/strings pass through; {"value": x, ...} yields x; anything else None."""
    if isinstance(raw, dict):
        return raw.get("value")
    if isinstance(raw, int | float | str) and not isinstance(raw, bool):
        return raw
    return None


def _market_status(data: dict[str, Any]) -> str:
    has_listings = bool(data.get("activeListings"))
    for_sale = "forSale" in (data.get("marketStatus") or [])
    return "For Sale" if has_listings or for_sale else "Off market"


def _image_urls(data: dict[str, Any]) -> list[str]:
    image = data.get("image")
    if not image or not image.get("sha"):
        return []
    return [IMAGE_URL_TEMPLATE.format(size=IMAGE_SIZE, sha=image["sha"], ext=image.get("extension", "jpg"))]


def normalize_property_summary(data: dict[str, Any]) -> PropertySummary:
    """Build a PropertySummary from a /v2/properties/{id}/summary payload."""
    addr = data.get("address") or {}
    attrs = data.get("attributes") or {}
    return PropertySummary(
        property_id=str(data["propertyId"]),
        address=PropertyAddress(
            full_address=addr.get("fullAddress", ""),
            suburb=addr.get("suburb"),
            state=addr.get("state"),
            postcode=addr.get("postcode"),
        ),
        attributes=PropertyAttributes(
            property_type=extract_value(attrs.get("propertyType")),
            bedrooms=extract_value(attrs.get("bedrooms")),
            bathrooms=extract_value(attrs.get("bathrooms")),
            car_spaces=extract_value(attrs.get("carSpaces")),
            # provider names: landArea / livingArea
            land_size=extract_value(attrs.get("landArea")),
            floor_plan_size=extract_value(attrs.get("livingArea")),
        ),
        market_status=_market_status(data),
        image_urls=_image_urls(data),
    )


def normalize_valuation(data: dict[str, Any]) -> PropertyValuation:
    """Build a PropertyValuation from a /v1/properties/{id}/valuations/sale payload."""
    return PropertyValuation(
        property_id=str(data["propertyId"]),
        estimated_value=float(data["estimatedValue"]),
        lower_range_value=data.get("lowerRangeValue"),
        upper_range_value=data.get("upperRangeValue"),
        confidence_level=data.get("confidenceLevel"),
        valuation_date=data.get("valuationDate"),
    )
