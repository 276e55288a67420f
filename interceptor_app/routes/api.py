"""
REST API endpoints of the application under test.

A deliberately small consumer of "the external API": it fetches a list
of items from ``/api/v2/external-endpoint`` and relays it.  In test mode
``EXTERNAL_API_BASE`` points at the interceptor, so the data comes from
whatever mock the test registered.

Endpoints:
    GET    /api/health         - Health check
    GET    /api/external-data  - Data fetched from the external API
"""

import logging
import os

from flask import Blueprint, Response, current_app, jsonify

from ..errors import ExternalApiError
from ..external_client import ExternalApiClient

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

EXTERNAL_ENDPOINT = "/api/v2/external-endpoint"


def get_external_client() -> ExternalApiClient:
    """Return the external API client built at application startup."""
    return current_app.extensions["external_api"]


def fetch_external_items() -> list:
    """
    Fetch the item list from the external API.

    Returns:
        The ``data`` list from the external response (empty if absent).

    Raises:
        ExternalApiError: If the call fails or the payload is malformed.
    """
    payload = get_external_client().get_json(EXTERNAL_ENDPOINT)
    if not isinstance(payload, dict):
        raise ExternalApiError("External API payload must be a JSON object")
    items = payload.get("data", [])
    if not isinstance(items, list):
        raise ExternalApiError("External API 'data' must be a list")
    return items


@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Health check endpoint for deployment verification."""
    return jsonify({
        "status": "healthy",
        "service": "interceptor",
        "environment": os.getenv("ENVIRONMENT", "unknown"),
        "mocks_enabled": "mock_interceptor" in current_app.extensions,
    }), 200


@api_bp.route("/external-data", methods=["GET"])
def get_external_data() -> tuple[Response, int]:
    """
    Relay data from the external API.

    Returns:
        JSON response with the items and 200 status code, or an error
        message and 502 if the external API failed.
    """
    logger.info("GET /api/external-data - Fetching external items")
    try:
        items = fetch_external_items()
    except ExternalApiError as exc:
        logger.warning("External API failure: %s", exc)
        return jsonify({"error": str(exc)}), 502

    return jsonify({"data": items, "count": len(items)}), 200
