# bridging/core/property/__init__.py

from .auth import ClientCredentialsTokenProvider
from .client import PropertyDataProvider, PropTrackClient
from .errors import (
    AuthenticationError,
    InvalidPayloadError,
    NetworkError,
    PropertyDataError,
    UpstreamStatusError,
    property_error_guard,
)
from .normalize import extract_value, normalize_property_summary, normalize_valuation

__all__ = [
    "ClientCredentialsTokenProvider",
    "PropertyDataProvider",
    "PropTrackClient",
    "PropertyDataError",
    "AuthenticationError",
    "NetworkError",
    "UpstreamStatusError",
    "InvalidPayloadError",
    "property_error_guard",
    "extract_value",
    "normalize_property_summary",
    "normalize_valuation",
]
