"""
Shared pytest fixtures for the mock interceptor test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure test
isolation by resetting the interceptor after every test.

Key Concepts Demonstrated:
- Fixture scopes (function, session)
- Fixture dependencies
- Test data factories
- Live server for tests that need real outbound HTTP
- Per-test reset of mock routes and the call journal
"""

import os
from collections.abc import Callable
from typing import Any

import pytest
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"
# The live app calls itself; keep local traffic away from any HTTP proxy.
os.environ["NO_PROXY"] = ",".join(filter(None, [os.environ.get("NO_PROXY", ""), "127.0.0.1", "localhost"]))

from config import DEFAULT_MOCK_ROUTE_PREFIX
from interceptor_app import create_app, get_dispatcher
from interceptor_app.dispatcher import Dispatcher
from interceptor_app.gate import EnvironmentGate
from interceptor_app.models import InterceptedRequest, json_response
from interceptor_app.registry import RouteRegistry
from tests.live_server import find_free_port, run_live_server


# Initialize Faker for generating test data
fake = Faker()


# -----------------------------------------------------------------------------
# Core Object Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def gate() -> EnvironmentGate:
    """An open environment gate (test mode on)."""
    return EnvironmentGate(test_mode=True)


@pytest.fixture
def closed_gate() -> EnvironmentGate:
    """A closed environment gate, as in production."""
    return EnvironmentGate(test_mode=False)


@pytest.fixture
def registry(gate: EnvironmentGate) -> RouteRegistry:
    """A fresh, empty registry for each test."""
    return RouteRegistry(gate)


@pytest.fixture
def dispatcher(registry: RouteRegistry) -> Dispatcher:
    """A dispatcher bound to the per-test registry."""
    return Dispatcher(registry)


@pytest.fixture
def request_factory() -> Callable[..., InterceptedRequest]:
    """
    Factory fixture for creating InterceptedRequest instances.

    Example:
        def test_something(request_factory):
            request = request_factory("GET", "/api/items")
    """

    def _make(method: str = "GET", path: str = "/", **kwargs: Any) -> InterceptedRequest:
        return InterceptedRequest(method=method, path=path, **kwargs)

    return _make


@pytest.fixture
def payload_factory() -> Callable[..., dict[str, Any]]:
    """Factory for realistic JSON payloads returned by mocks."""

    def _make(count: int = 3) -> dict[str, Any]:
        return {"data": [fake.sentence(nb_words=4) for _ in range(count)]}

    return _make


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def app():
    """
    Create application instance for the test session.

    The 'session' scope means the same app instance is reused for all
    tests; the ``interceptor`` fixture resets its mocks between tests.

    Yields:
        Flask application instance configured for testing.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """
    Create a test client for making HTTP requests.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def interceptor(app) -> Dispatcher:
    """
    Provide the app's dispatcher, reset after each test.

    Yields:
        The mounted ``Dispatcher``; use ``interceptor.registry`` to register mocks.
    """
    mounted = get_dispatcher(app)
    mounted.reset()
    yield mounted
    mounted.reset()


@pytest.fixture
def mock_prefix() -> str:
    return DEFAULT_MOCK_ROUTE_PREFIX


# -----------------------------------------------------------------------------
# Live Server Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture(scope="session")
def live_app():
    """
    Application whose external API base points at its own mock prefix.

    The port is chosen before the app is built because the base URL is
    read once, at startup.
    """
    port = find_free_port()
    base_url = f"http://127.0.0.1:{port}"
    application = create_app(
        "testing",
        config_overrides={"EXTERNAL_API_BASE": f"{base_url}{DEFAULT_MOCK_ROUTE_PREFIX}"},
    )
    application.config["LIVE_SERVER_PORT"] = port
    return application


@pytest.fixture(scope="session")
def live_server(live_app):
    """
    Start the live app in a background thread.

    Yields:
        str: Base URL of the running server.
    """
    with run_live_server(live_app, live_app.config["LIVE_SERVER_PORT"]) as base_url:
        yield base_url


@pytest.fixture(scope="function")
def live_interceptor(live_app, live_server) -> Dispatcher:
    """Dispatcher of the live app, reset before and after each test."""
    mounted = get_dispatcher(live_app)
    mounted.reset()
    yield mounted
    mounted.reset()


@pytest.fixture
def external_endpoint_mock() -> tuple:
    """The canonical mock: GET /api/v2/external-endpoint -> 200 {"data": ["We did it!"]}."""
    return (
        "GET",
        "/api/v2/external-endpoint",
        lambda request: json_response({"data": ["We did it!"]}),
    )
