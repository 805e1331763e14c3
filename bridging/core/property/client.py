# bridging/core/property/client.py
"""
Property-data client.

PropertyDataProvider is the seam callers depend on to pre-fill property
values; PropTrackClient is the requests-backed implementation. The engine
itself never calls this module.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from bridging.schemas.models import PropertySummary, PropertyValuation

from .auth import DEFAULT_BASE_URL, ClientCredentialsTokenProvider
from .errors import AuthenticationError, InvalidPayloadError, UpstreamStatusError, property_error_guard
from .normalize import normalize_property_summary, normalize_valuation

logger = logging.getLogger(__name__)


class PropertyDataProvider(Protocol):
    def get_property_summary(self, property_id: str) -> PropertySummary: ...

    def get_sale_valuation(self, property_id: str) -> PropertyValuation: ...


class PropTrackClient:
    """Bearer-authenticated GETs against the property summary and valuation endpoints."""

    def __init__(
        self,
        token_provider: ClientCredentialsTokenProvider,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout_s: float = 15.0,
    ) -> None:
        self._tokens = token_provider
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_s = timeout_s

    def get_property_summary(self, property_id: str) -> PropertySummary:
        with property_error_guard():
            return normalize_property_summary(self._get_json(f"/v2/properties/{property_id}/summary"))

    def get_sale_valuation(self, property_id: str) -> PropertyValuation:
        with property_error_guard():
            return normalize_valuation(self._get_json(f"/v1/properties/{property_id}/valuations/sale"))

    def _get_json(self, path: str) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        logger.debug("GET %s", url)
        resp = self._session.get(
            url,
            headers={"Authorization": f"Bearer {self._tokens.get_token()}", "Content-Type": "application/json"},
            timeout=self._timeout_s,
        )
        if resp.status_code == 401:
            # stale token; the next call fetches a fresh one
            self._tokens.invalidate()
            raise AuthenticationError(f"unauthorised for {path}")
        if not resp.ok:
            logger.warning("property-data error %s for %s", resp.status_code, path)
            raise UpstreamStatusError(resp.status_code, resp.reason or "")

        payload = resp.json()
        if not isinstance(payload, dict):
            raise InvalidPayloadError(f"expected a JSON object from {path}")
        return payload
