"""
Unit tests for configuration selection and the test-mode switch.
"""

import importlib

import pytest

import config as config_module


pytestmark = pytest.mark.unit


@pytest.fixture
def reload_config(monkeypatch):
    """Reload config.py after adjusting the environment, restoring it afterwards."""

    def _reload(**env):
        for name, value in env.items():
            if value is None:
                monkeypatch.delenv(name, raising=False)
            else:
                monkeypatch.setenv(name, value)
        return importlib.reload(config_module)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config_module)


@pytest.mark.parametrize("env, expected", [
    ("development", "DevelopmentConfig"),
    ("testing", "TestingConfig"),
    ("production", "ProductionConfig"),
    ("nonsense", "DevelopmentConfig"),
])
def test_get_config_by_name(env, expected):
    assert config_module.get_config(env).__name__ == expected


def test_get_config_falls_back_to_flask_env(monkeypatch):
    monkeypatch.setenv("FLASK_ENV", "production")

    assert config_module.get_config() is config_module.ProductionConfig


def test_testing_config_always_enables_mocks():
    assert config_module.TestingConfig.MOCK_INTERCEPTOR_ENABLED is True


@pytest.mark.parametrize("value", ["true", "1", "yes", "ON"])
def test_test_mode_variable_enables_mocks_in_development(reload_config, value):
    module = reload_config(TEST_MODE=value)

    assert module.DevelopmentConfig.MOCK_INTERCEPTOR_ENABLED is True


def test_mocks_disabled_by_default(reload_config):
    module = reload_config(TEST_MODE=None)

    assert module.DevelopmentConfig.MOCK_INTERCEPTOR_ENABLED is False


def test_production_ignores_test_mode_variable(reload_config):
    """Test that production never mounts mocks, even with TEST_MODE set."""
    module = reload_config(TEST_MODE="true")

    assert module.ProductionConfig.MOCK_INTERCEPTOR_ENABLED is False


def test_external_api_base_is_read_from_environment(reload_config):
    module = reload_config(EXTERNAL_API_BASE="http://localhost:9999/__test_mocks__")

    assert module.Config.EXTERNAL_API_BASE == "http://localhost:9999/__test_mocks__"


def test_mock_route_prefix_default():
    assert config_module.Config.MOCK_ROUTE_PREFIX == "/__test_mocks__"
