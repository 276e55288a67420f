"""
Mock interceptor routes.

This blueprint is the HTTP face of the interceptor.  It is registered by
the application factory under the reserved ``MOCK_ROUTE_PREFIX``
(``/__test_mocks__`` by default) and only when the environment gate is
open, so in production none of these URLs exist.

Endpoints:
    POST   /_admin/routes   - Register a static mock route from JSON
    GET    /_admin/routes   - List registered mock routes
    POST   /_admin/reset    - Clear routes and the call journal
    GET    /_admin/calls    - Inspect the call journal
    ANY    /<path>          - Dispatch to the matching mock route

The admin endpoints let a test runner in another process (a Playwright
suite driving a browser, say) arrange mocks over HTTP; in-process tests
usually talk to the registry directly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import MethodNotAllowed

from ..dispatcher import Dispatcher
from ..errors import DuplicateRouteError, InvalidRouteError
from ..models import InterceptedRequest, MockResponse, normalize_method, static_responder

logger = logging.getLogger(__name__)

mocks_bp = Blueprint("mocks", __name__)

EXTENSION_KEY = "mock_interceptor"

DISPATCH_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Hop-by-hop headers describe a single connection and are never replayed
# from a canned response.
HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}


# -----------------------------------------------------------------------------
# Helper Functions
# -----------------------------------------------------------------------------

def get_dispatcher() -> Dispatcher:
    """Return the dispatcher attached to the current application."""
    return current_app.extensions[EXTENSION_KEY]


def mock_route_prefix(app_config: Mapping[str, Any]) -> str:
    """Normalise ``MOCK_ROUTE_PREFIX`` to a single leading slash and no trailing one."""
    return "/" + app_config["MOCK_ROUTE_PREFIX"].strip("/")


def build_intercepted_request(path: str) -> InterceptedRequest:
    """
    Capture the current Flask request as an ``InterceptedRequest``.

    Args:
        path: Path captured after the mock prefix (without leading slash).

    Returns:
        The transient request handed to the dispatcher.
    """
    return InterceptedRequest(
        method=request.method,
        path=f"/{path}",
        headers=dict(request.headers.items()),
        body=request.get_data(),
        query=request.args.to_dict(flat=False),
    )


def to_flask_response(mock_response: MockResponse) -> Response:
    """Convert a ``MockResponse`` into a Flask ``Response``."""
    response = Response(
        mock_response.body_bytes(),
        status=mock_response.status,
        content_type=mock_response.content_type(),
    )
    for name, value in mock_response.headers.items():
        lower = name.lower()
        if lower in HOP_BY_HOP_HEADERS or lower in {"content-type", "content-length"}:
            continue
        response.headers[name] = value
    return response


def validate_route_payload(data: Any) -> tuple[bool, str | None]:
    """
    Validate a JSON mock route definition.

    Args:
        data: Decoded request body.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not isinstance(data, dict):
        return False, "Request body must be a JSON object"

    for field in ("method", "path"):
        value = data.get(field)
        if not value or not isinstance(value, str) or not value.strip():
            return False, f"'{field}' is required"

    try:
        normalize_method(data["method"])
    except ValueError as exc:
        return False, str(exc)

    status = data.get("status", 200)
    if not isinstance(status, int) or isinstance(status, bool) or not 100 <= status <= 599:
        return False, "status must be an integer between 100 and 599"

    headers = data.get("headers", {})
    if headers is not None and not isinstance(headers, dict):
        return False, "headers must be an object"
    if headers and not all(isinstance(k, str) and isinstance(v, str) for k, v in headers.items()):
        return False, "header names and values must be strings"

    return True, None


# -----------------------------------------------------------------------------
# Admin Endpoints
# -----------------------------------------------------------------------------

@mocks_bp.route("/_admin/routes", methods=["GET"])
def list_routes() -> tuple[Response, int]:
    """List every registered mock route."""
    routes = [route.to_dict() for route in get_dispatcher().registry.routes()]
    return jsonify({"routes": routes, "count": len(routes)}), 200


@mocks_bp.route("/_admin/routes", methods=["POST"])
def create_route() -> tuple[Response, int]:
    """
    Register a static mock route.

    Request Body (JSON):
        method: HTTP verb (required)
        path: Path relative to the mock prefix, starting with "/" (required)
        status: Response status (optional, default: 200)
        body: Response body; strings are sent as-is, anything else as JSON
        headers: Response headers (optional)

    Returns:
        JSON response with the route and 201 status code, 400 if the
        payload is invalid, or 409 if the route already exists.
    """
    data = request.get_json(silent=True)
    is_valid, error = validate_route_payload(data)
    if not is_valid:
        logger.warning("Rejected mock route payload: %s", error)
        return jsonify({"error": error}), 400

    headers = dict(data.get("headers") or {})
    body = data.get("body", "")
    if not isinstance(body, str) and not any(k.lower() == "content-type" for k in headers):
        headers["Content-Type"] = "application/json"
    canned = MockResponse(status=data.get("status", 200), body=body, headers=headers)

    try:
        route = get_dispatcher().registry.register(data["method"], data["path"], static_responder(canned))
    except DuplicateRouteError as exc:
        return jsonify({"error": str(exc)}), 409
    except InvalidRouteError as exc:
        return jsonify({"error": str(exc)}), 400

    return jsonify(route.to_dict()), 201


@mocks_bp.route("/_admin/reset", methods=["POST"])
def reset_state() -> Response:
    """Clear routes and the call journal; returns 204 with no body."""
    get_dispatcher().reset()
    return Response(status=204)


@mocks_bp.route("/_admin/calls", methods=["GET"])
def list_calls() -> tuple[Response, int]:
    calls = [call.to_dict() for call in get_dispatcher().calls]
    return jsonify({"calls": calls, "count": len(calls)}), 200


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

@mocks_bp.route("/", defaults={"path": ""}, methods=DISPATCH_METHODS)
@mocks_bp.route("/<path:path>", methods=DISPATCH_METHODS)
def dispatch(path: str) -> Response:
    """
    Answer an intercepted call from the registered mocks.

    Args:
        path: Everything after the mock prefix.

    Returns:
        The canned response, or a diagnostic 404 when nothing matches.
    """
    mock_response = get_dispatcher().handle(build_intercepted_request(path))
    return to_flask_response(mock_response)


# -----------------------------------------------------------------------------
# Error Handlers
# -----------------------------------------------------------------------------

def method_not_allowed(error: MethodNotAllowed) -> Response | MethodNotAllowed:
    """
    Handle 405 errors raised while routing.

    Routing errors happen before a blueprint is selected, so this is
    registered on the app.  Paths under the mock prefix get a JSON body;
    every other path keeps Flask's default response.
    """
    prefix = mock_route_prefix(current_app.config)
    if request.path != prefix and not request.path.startswith(prefix + "/"):
        return error

    response = jsonify({
        "error": "Method not allowed",
        "method": request.method,
        "path": request.path,
        "allowed": sorted(error.valid_methods or []),
    })
    response.status_code = 405
    return response


@mocks_bp.errorhandler(500)
def internal_error(error: Exception) -> tuple[Response, int]:
    """Handle 500 Internal Server errors."""
    logger.error("Internal server error in mock interceptor: %s", error)
    return jsonify({"error": "Internal server error"}), 500
