"""
Mock route registry.

Holds the mock endpoint definitions for one application instance.  Routes
are identified by their ``(method, path)`` pair, which must be unique:
registering the same pair twice fails fast with ``DuplicateRouteError``
instead of silently overwriting the earlier mock.

Paths are matched exactly.  As an extension, a segment written as
``<name>`` matches any single non-empty segment and its value is handed
to the responder as a path parameter; static routes always win over
pattern routes.

Key Concepts Demonstrated:
- Registry constructed only behind an open ``EnvironmentGate``
- Builder-style bulk registration from ``(method, path, responder)`` tuples
- Lock-guarded state so live-server request threads can read safely
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

from .errors import DuplicateRouteError, InvalidRouteError
from .gate import EnvironmentGate
from .models import Responder, normalize_method

logger = logging.getLogger(__name__)

# Namespace under the mock prefix reserved for the admin endpoints.
ADMIN_NAMESPACE = "/_admin"

_PARAM_SEGMENT = re.compile(r"^<([A-Za-z_][A-Za-z0-9_]*)>$")


@dataclass(frozen=True)
class MockRoute:
    """
    A registered mock endpoint.

    Attributes:
        method: Upper-cased HTTP verb.
        path: Static path or pattern (``/users/<user_id>``).
        responder: Callable producing the canned response.
    """

    method: str
    path: str
    responder: Responder = field(compare=False)

    @property
    def key(self) -> tuple[str, str]:
        return self.method, self.path

    @property
    def is_pattern(self) -> bool:
        return any(_PARAM_SEGMENT.match(segment) for segment in self.path.split("/"))

    def match_path(self, path: str) -> dict[str, str] | None:
        """
        Match a concrete request path against this route.

        Returns:
            Captured path parameters (empty for static routes), or None
            when the path does not match.
        """
        if not self.is_pattern:
            return {} if path == self.path else None

        pattern_segments = self.path.split("/")
        path_segments = path.split("/")
        if len(pattern_segments) != len(path_segments):
            return None

        params: dict[str, str] = {}
        for expected, actual in zip(pattern_segments, path_segments):
            param = _PARAM_SEGMENT.match(expected)
            if param:
                if not actual:
                    return None
                params[param.group(1)] = actual
            elif expected != actual:
                return None
        return params

    def to_dict(self) -> dict[str, str]:
        return {"method": self.method, "path": self.path}


@dataclass(frozen=True)
class RouteMatch:
    """Result of a successful lookup: the route plus any captured parameters."""

    route: MockRoute
    path_params: dict[str, str] = field(default_factory=dict)


RouteSpec = Union[MockRoute, tuple]


def validate_route_path(path: str) -> str:
    """
    Validate a mock route path and return it unchanged.

    Raises:
        InvalidRouteError: If the path is empty, relative, carries a query
            string, or falls inside the reserved admin namespace.
    """
    if not isinstance(path, str) or not path.startswith("/"):
        raise InvalidRouteError(f"Mock path must start with '/': {path!r}")
    if "?" in path or "#" in path:
        raise InvalidRouteError(f"Mock path must not contain a query string or fragment: {path!r}")
    if path == ADMIN_NAMESPACE or path.startswith(ADMIN_NAMESPACE + "/"):
        raise InvalidRouteError(f"Mock path is reserved for the admin endpoints: {path!r}")
    return path


class RouteRegistry:
    """
    Per-application store of mock routes.

    Args:
        gate: Environment gate; construction fails unless it reports test mode.
        routes: Optional routes to register immediately, as ``MockRoute``
            objects or ``(method, path, responder)`` tuples.

    Raises:
        TestModeRequiredError: If the gate is closed.
    """

    def __init__(self, gate: EnvironmentGate, routes: Iterable[RouteSpec] | None = None):
        gate.require_test_mode("create a mock route registry")
        self._gate = gate
        self._routes: dict[tuple[str, str], MockRoute] = {}
        self._lock = threading.Lock()
        if routes:
            self.register_many(routes)

    @property
    def gate(self) -> EnvironmentGate:
        return self._gate

    def register(self, method: str, path: str, responder: Responder) -> MockRoute:
        """
        Register a mock route.

        Args:
            method: HTTP verb (case-insensitive).
            path: Path starting with "/", optionally containing ``<name>`` segments.
            responder: Callable taking an ``InterceptedRequest`` and returning
                a ``MockResponse`` or a ``(status, body[, headers])`` tuple.

        Returns:
            The stored ``MockRoute``.

        Raises:
            DuplicateRouteError: If ``(method, path)`` is already registered.
            InvalidRouteError: If the method, path or responder is invalid.
        """
        self._gate.require_test_mode("register a mock route")
        try:
            method = normalize_method(method)
        except ValueError as exc:
            raise InvalidRouteError(str(exc)) from exc
        validate_route_path(path)
        if not callable(responder):
            raise InvalidRouteError(f"Responder for {method} {path} is not callable")

        route = MockRoute(method=method, path=path, responder=responder)
        with self._lock:
            if route.key in self._routes:
                raise DuplicateRouteError(method, path)
            self._routes[route.key] = route

        logger.info("Registered mock route %s %s", method, path)
        return route

    def register_many(self, routes: Iterable[RouteSpec]) -> list[MockRoute]:
        """Register several routes supplied by the test framework at setup time."""
        registered = []
        for spec in routes:
            if isinstance(spec, MockRoute):
                registered.append(self.register(spec.method, spec.path, spec.responder))
                continue
            try:
                method, path, responder = spec
            except (TypeError, ValueError) as exc:
                raise InvalidRouteError(
                    f"Route must be a MockRoute or (method, path, responder) tuple: {spec!r}"
                ) from exc
            registered.append(self.register(method, path, responder))
        return registered

    def match(self, method: str, path: str) -> RouteMatch | None:
        """
        Find the route answering ``method`` + ``path``.

        Static routes are checked first; pattern routes are tried in
        registration order.
        """
        try:
            method = normalize_method(method)
        except ValueError:
            return None

        with self._lock:
            route = self._routes.get((method, path))
            if route is not None:
                return RouteMatch(route=route)
            candidates = [r for r in self._routes.values() if r.method == method and r.is_pattern]

        for candidate in candidates:
            params = candidate.match_path(path)
            if params is not None:
                return RouteMatch(route=candidate, path_params=params)
        return None

    def lookup(self, method: str, path: str) -> MockRoute | None:
        """Return the route for ``method`` + ``path``, or None when nothing matches."""
        found = self.match(method, path)
        return found.route if found else None

    def clear(self) -> None:
        """Remove every route; used between test cases."""
        with self._lock:
            count = len(self._routes)
            self._routes.clear()
        logger.info("Cleared %d mock route(s)", count)

    def routes(self) -> list[MockRoute]:
        with self._lock:
            return list(self._routes.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.lookup(*key) is not None
