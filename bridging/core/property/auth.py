# bridging/core/property/auth.py
"""
OAuth2 client-credentials token provider.

Each provider instance owns its cached token; there is no module-level state,
so separate clients (or tests) never share credentials.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import requests

from bridging.schemas.models import AccessToken

from .errors import AuthenticationError, NetworkError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://data.proptrack.com"
EXPIRY_BUFFER = timedelta(seconds=30)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ClientCredentialsTokenProvider:
    """
    Fetches and caches a bearer token.

    Args:
        auth_header: Full Basic authorization header value ("Basic <base64>").
        base_url:    Provider root; the token lives at {base_url}/oauth2/token.
        session:     Optional requests.Session (injected in tests).
        timeout_s:   Request timeout in seconds.
        clock:       Callable returning an aware "now" (injected in tests).
    """

    def __init__(
        self,
        auth_header: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        session: requests.Session | None = None,
        timeout_s: float = 15.0,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not auth_header:
            raise AuthenticationError("missing client credentials auth header")
        self._auth_header = auth_header
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_s = timeout_s
        self._clock = clock
        self._token: AccessToken | None = None

    def get_token(self) -> str:
        """Return a valid access token, refreshing it when missing or expired."""
        now = self._clock()
        if self._token is not None and self._token.is_valid(now):
            return self._token.value
        self._token = self._request_token(now)
        return self._token.value

    def invalidate(self) -> None:
        self._token = None

    def _request_token(self, now: datetime) -> AccessToken:
        logger.info("requesting new property-data access token")
        try:
            resp = self._session.post(
                f"{self._base_url}/oauth2/token",
                headers={
                    "Authorization": self._auth_header,
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data="grant_type=client_credentials",
                timeout=self._timeout_s,
            )
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e

        if not resp.ok:
            raise AuthenticationError(f"token request failed: {resp.status_code} {resp.reason}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise AuthenticationError(f"token response was not JSON: {e}") from e

        value = payload.get("access_token")
        if not value:
            raise AuthenticationError("token response did not include an access_token")

        expires_in = float(payload.get("expires_in", 0))
        return AccessToken(value=value, expires_at=now + timedelta(seconds=expires_in) - EXPIRY_BUFFER)
