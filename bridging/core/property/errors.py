# bridging/core/property/errors.py
"""
Typed errors for the property-data client.

Exports
-------
- PropertyDataError, AuthenticationError, NetworkError,
  UpstreamStatusError, InvalidPayloadError
- PROPERTY_ERRORS
- classify_property_error(exc)
- property_error_guard()
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import requests

# =========================
# Exception types
# =========================


class PropertyDataError(RuntimeError):
    """Base class for property-data failures."""


class AuthenticationError(PropertyDataError):
    """The token endpoint rejected the credentials or returned no token."""


class NetworkError(PropertyDataError):
    """HTTP/transport failure while talking to the provider."""


class UpstreamStatusError(PropertyDataError):
    """The provider answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"upstream returned {status_code}" + (f": {message}" if message else ""))


class InvalidPayloadError(PropertyDataError):
    """Response body was not JSON or lacked required fields."""


PROPERTY_ERRORS = (
    AuthenticationError,
    NetworkError,
    UpstreamStatusError,
    InvalidPayloadError,
)

# =========================
# Classification helpers
# =========================


def classify_property_error(exc: Exception) -> PropertyDataError:
    """
    Map arbitrary exceptions raised inside the client to a PropertyDataError.

      - PropertyDataError subclasses pass through
      - requests JSON decode errors → InvalidPayloadError
      - other requests.* errors → NetworkError
      - ValueError/KeyError/TypeError (JSON decode, missing keys) → InvalidPayloadError
      - anything else → PropertyDataError
    """
    if isinstance(exc, PropertyDataError):
        return exc

    msg = f"{type(exc).__name__}: {exc}"
    # requests' JSONDecodeError is also a RequestException
    if isinstance(exc, requests.exceptions.JSONDecodeError):
        return InvalidPayloadError(msg)
    if isinstance(exc, requests.RequestException):
        return NetworkError(msg)
    if isinstance(exc, (ValueError | KeyError | TypeError)):
        return InvalidPayloadError(msg)
    return PropertyDataError(msg)


@contextmanager
def property_error_guard() -> Iterator[None]:
    """Normalise unexpected exceptions from client internals into typed errors."""
    try:
        yield
    except PROPERTY_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_property_error(exc) from exc


__all__ = [
    "PropertyDataError",
    "AuthenticationError",
    "NetworkError",
    "UpstreamStatusError",
    "InvalidPayloadError",
    "PROPERTY_ERRORS",
    "classify_property_error",
    "property_error_guard",
]
