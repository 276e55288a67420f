"""
Flask application factory for the mock interceptor.

This module creates and configures the application using the factory
pattern.  The same application serves two roles:

* the **application under test**, whose outbound calls go to the base
  URL configured in ``EXTERNAL_API_BASE``;
* the **interceptor**, a blueprint of mock routes mounted under a
  reserved prefix that answers those calls with canned responses.

The interceptor half is mounted only when the environment gate reports
test mode.  Outside test mode no registry or dispatcher is constructed
and the mock prefix is just another unknown URL.

Key Concepts Demonstrated:
- Application Factory pattern (create_app) for flexible configuration
- Explicit test-mode injection instead of ambient environment checks
- Per-app registry so parallel test workers never share mock routes
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from flask import Flask

from config import get_config

from .dispatcher import Dispatcher
from .errors import TestModeRequiredError
from .external_client import ExternalApiClient
from .gate import EnvironmentGate
from .registry import RouteRegistry, RouteSpec

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    config_name: str | None = None,
    mock_routes: Iterable[RouteSpec] | None = None,
    config_overrides: Mapping[str, Any] | None = None,
) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.
        mock_routes: Optional ``(method, path, responder)`` tuples to
                     register at startup.  Only valid in test mode.
        config_overrides: Settings applied on top of the config class,
                     e.g. an ``EXTERNAL_API_BASE`` pointing at a live server.

    Returns:
        Configured Flask application instance.

    Raises:
        TestModeRequiredError: If ``mock_routes`` are supplied while the
            gate is closed.
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    logger.info("Creating app with config: %s", config_class.__name__)

    # The external API base is read exactly once, here.
    app.extensions["external_api"] = ExternalApiClient(
        app.config["EXTERNAL_API_BASE"],
        timeout=app.config["EXTERNAL_API_TIMEOUT"],
    )

    # Register blueprints
    from .routes.api import api_bp
    from .routes.views import views_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    app.register_blueprint(views_bp)

    gate = EnvironmentGate.from_config(app.config)
    if gate.is_test_mode_active():
        _mount_interceptor(app, gate, mock_routes)
    elif mock_routes:
        raise TestModeRequiredError("register mock routes at startup")
    else:
        logger.info("Test mode inactive; mock interceptor not mounted")

    return app


def _mount_interceptor(app: Flask, gate: EnvironmentGate, mock_routes: Iterable[RouteSpec] | None) -> None:
    """Build the registry and dispatcher and mount the mock blueprint."""
    from .routes.mocks import EXTENSION_KEY, method_not_allowed, mock_route_prefix, mocks_bp

    registry = RouteRegistry(gate, mock_routes)
    app.extensions[EXTENSION_KEY] = Dispatcher(registry, gate)

    prefix = mock_route_prefix(app.config)
    app.register_blueprint(mocks_bp, url_prefix=prefix)
    app.register_error_handler(405, method_not_allowed)
    logger.info("Mock interceptor mounted at %s with %d route(s)", prefix, len(registry))


def get_dispatcher(app: Flask) -> Dispatcher:
    """
    Return the dispatcher mounted on ``app``.

    Raises:
        TestModeRequiredError: If the interceptor is not mounted.
    """
    from .routes.mocks import EXTENSION_KEY

    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:
        raise TestModeRequiredError("access the mock dispatcher") from None


def get_registry(app: Flask) -> RouteRegistry:
    """Return the route registry mounted on ``app``."""
    return get_dispatcher(app).registry
