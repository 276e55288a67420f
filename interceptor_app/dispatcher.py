"""
Mock request dispatcher.

Matches intercepted requests against the route registry and returns the
registered canned response.  An unmatched request is not an error: it
gets a 404 whose body names the method and path that had no mock, so a
failing test shows exactly which mock is missing.

Every handled request is recorded in a call journal that tests can
inspect to assert on the outbound traffic the application produced.

Key Concepts Demonstrated:
- Structural gating: no dispatcher exists outside test mode
- Diagnostic 404s instead of silent fallthrough
- Responder failures surfaced as 500s without crashing the server thread
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from .gate import EnvironmentGate
from .models import InterceptedRequest, MockResponse, json_response
from .registry import RouteRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedCall:
    """One journal entry: the request and the status it was answered with."""

    request: InterceptedRequest
    status: int
    matched_route: str | None

    def to_dict(self) -> dict:
        data = self.request.to_dict()
        data["status"] = self.status
        data["matched_route"] = self.matched_route
        return data


class Dispatcher:
    """
    Answers intercepted requests from a ``RouteRegistry``.

    Args:
        registry: Registry holding the mock routes.
        gate: Environment gate; defaults to the registry's own gate.

    Raises:
        TestModeRequiredError: If the gate is closed.
    """

    def __init__(self, registry: RouteRegistry, gate: EnvironmentGate | None = None):
        gate = gate or registry.gate
        gate.require_test_mode("create a mock dispatcher")
        self._gate = gate
        self._registry = registry
        self._calls: list[RecordedCall] = []
        self._calls_lock = threading.Lock()

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    def handle(self, request: InterceptedRequest) -> MockResponse:
        """
        Dispatch one intercepted request.

        Args:
            request: The inbound call, with the mock prefix already stripped.

        Returns:
            The responder's response, a diagnostic 404 when no route
            matches, or a diagnostic 500 when the responder raised.
        """
        self._gate.require_test_mode("dispatch a mock request")

        found = self._registry.match(request.method, request.path)
        if found is None:
            logger.warning("No mock route for %s %s", request.method, request.path)
            response = self._not_found(request)
            self._record(request, response.status, None)
            return response

        route = found.route
        if found.path_params:
            request = InterceptedRequest(
                method=request.method,
                path=request.path,
                headers=request.headers,
                body=request.body,
                query=request.query,
                path_params=found.path_params,
            )

        try:
            response = MockResponse.coerce(route.responder(request))
            # An unserialisable body must fail here, not later in the view.
            response.body_bytes()
        except Exception as exc:
            logger.exception("Mock responder for %s %s failed", route.method, route.path)
            response = json_response(
                {
                    "error": "Mock responder failed",
                    "method": request.method,
                    "path": request.path,
                    "route": f"{route.method} {route.path}",
                    "detail": f"{type(exc).__name__}: {exc}",
                },
                status=500,
            )

        logger.info("Mock %s %s -> %d", request.method, request.path, response.status)
        self._record(request, response.status, f"{route.method} {route.path}")
        return response

    def _not_found(self, request: InterceptedRequest) -> MockResponse:
        registered = [f"{route.method} {route.path}" for route in self._registry.routes()]
        return json_response(
            {
                "error": "No mock route registered",
                "message": f"No mock route registered for {request.method} {request.path}",
                "method": request.method,
                "path": request.path,
                "registered": registered,
            },
            status=404,
        )

    def _record(self, request: InterceptedRequest, status: int, matched_route: str | None) -> None:
        with self._calls_lock:
            self._calls.append(RecordedCall(request=request, status=status, matched_route=matched_route))

    @property
    def calls(self) -> list[RecordedCall]:
        """Snapshot of every request handled since the last reset."""
        with self._calls_lock:
            return list(self._calls)

    def calls_for(self, method: str, path: str) -> list[RecordedCall]:
        """Recorded calls for one concrete method + path."""
        method = method.upper()
        return [c for c in self.calls if c.request.method == method and c.request.path == path]

    def clear_calls(self) -> None:
        with self._calls_lock:
            self._calls.clear()

    def reset(self) -> None:
        """Clear the registry and the call journal for a clean test precondition."""
        self._registry.clear()
        self.clear_calls()
