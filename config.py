"""
Interceptor configuration module.

Defines configuration classes for the different environments
(development, testing, production).  Values are loaded from environment
variables with sensible defaults, and the ``get_config`` factory selects
the right class from the ``FLASK_ENV`` environment variable.

Two settings matter for the interceptor:

* ``MOCK_INTERCEPTOR_ENABLED``: the one designated test-mode indicator.
  It is derived from the ``TEST_MODE`` environment variable (or forced on
  by ``TestingConfig``) and pinned off in production.
* ``EXTERNAL_API_BASE``: the configuration switch.  The application
  reads it once at startup to build outbound URLs; pointing it at the
  interceptor's mock prefix reroutes every "external" call to the
  dispatcher.
"""

from __future__ import annotations

import os

DEFAULT_MOCK_ROUTE_PREFIX = "/__test_mocks__"


def _env_flag(name: str, default: str = "false") -> bool:
    """Interpret an environment variable as a boolean switch."""
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Base configuration with default settings."""

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-production")

    # Test mode comes from exactly one variable; nothing else is consulted.
    MOCK_INTERCEPTOR_ENABLED: bool = _env_flag("TEST_MODE")

    # Reserved prefix under which mock routes are mounted.
    MOCK_ROUTE_PREFIX: str = os.environ.get("MOCK_ROUTE_PREFIX", DEFAULT_MOCK_ROUTE_PREFIX)

    # Base URL of the real external API.  Overridden to the interceptor
    # address when the stack runs in test mode.
    EXTERNAL_API_BASE: str = os.environ.get("EXTERNAL_API_BASE", "https://api.example.com")

    # Seconds to wait for the external API before giving up with a 502.
    EXTERNAL_API_TIMEOUT: int = int(os.environ.get("EXTERNAL_API_TIMEOUT", "5"))


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Testing environment configuration.

    Mocks are always mounted here and the external API base defaults to a
    non-routable host so a test that forgets to redirect it never reaches
    a real service.
    """

    DEBUG: bool = True
    TESTING: bool = True
    MOCK_INTERCEPTOR_ENABLED: bool = True

    EXTERNAL_API_BASE: str = os.environ.get("TEST_EXTERNAL_API_BASE", "http://external-api.test")
    # Short timeout keeps tests that simulate an unreachable API fast.
    EXTERNAL_API_TIMEOUT: int = int(os.environ.get("TEST_EXTERNAL_API_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG: bool = False
    TESTING: bool = False
    # Never mounted in production, whatever TEST_MODE says.
    MOCK_INTERCEPTOR_ENABLED: bool = False


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, production).
             If None, uses FLASK_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
