"""
Outbound client for "the external API".

This is the application side of the configuration switch.  The base URL
is read once at startup from ``EXTERNAL_API_BASE`` and every outbound URL
is built from it, so pointing that one value at the interceptor's mock
prefix reroutes all external traffic to the dispatcher.  The client
makes no other assumption about where it is talking to.

Transport failures and error statuses are turned into ``ExternalApiError``
so route handlers can answer with a 502, the way a reverse proxy reports
a broken upstream.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from .errors import ExternalApiError

logger = logging.getLogger(__name__)


class ExternalApiClient:
    """
    Thin ``requests`` wrapper bound to one base URL.

    Args:
        base_url: Root of the external API (or of the interceptor's mock prefix).
        timeout: Seconds to wait for each response.
        session: Optional pre-built session; one is created when omitted.
    """

    def __init__(self, base_url: str, timeout: float = 5, session: requests.Session | None = None):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, path: str) -> str:
        """
        Build a full URL for an external API path.

        Joins the configured base with ``path``, stripping/adding slashes
        as needed to avoid double-slash issues.
        """
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Send a request to the external API with the configured timeout."""
        url = self.url_for(path)
        kwargs.setdefault("timeout", self.timeout)
        logger.info("External API %s %s", method.upper(), url)
        return self.session.request(method.upper(), url, **kwargs)

    def get_json(self, path: str, **kwargs: Any) -> Any:
        """
        GET ``path`` and decode the JSON body.

        Raises:
            ExternalApiError: On timeouts, connection failures, non-2xx
                statuses or a body that is not JSON.
        """
        try:
            response = self.request("GET", path, **kwargs)
        except requests.Timeout as exc:
            raise ExternalApiError("External API request timed out") from exc
        except requests.RequestException as exc:
            raise ExternalApiError("External API unavailable") from exc

        if not response.ok:
            logger.warning("External API returned %d for %s", response.status_code, path)
            raise ExternalApiError(
                f"External API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ExternalApiError("External API returned a non-JSON body", response.status_code) from exc
