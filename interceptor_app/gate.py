"""
Environment gate for the mock interceptor.

The gate is the single place that answers "are mocks allowed here?".  It
never looks at ambient global state: the test-mode flag is handed to it
explicitly, either directly or from the application's config mapping
(which ``config.py`` fills from the one ``TEST_MODE`` variable).

Everything that can serve a mock (the registry and the dispatcher) takes
a gate in its constructor and refuses to be built when the gate is
closed, so in production the mock machinery simply does not exist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import TestModeRequiredError

CONFIG_KEY = "MOCK_INTERCEPTOR_ENABLED"


class EnvironmentGate:
    """Explicit, injected test-mode indicator."""

    def __init__(self, test_mode: bool):
        self._test_mode = bool(test_mode)

    @classmethod
    def from_config(cls, app_config: Mapping[str, Any]) -> "EnvironmentGate":
        """
        Build a gate from a Flask config mapping.

        Args:
            app_config: The application's config; only ``MOCK_INTERCEPTOR_ENABLED``
                is read, and a missing key means the gate is closed.

        Returns:
            A gate reflecting the configured flag.
        """
        return cls(bool(app_config.get(CONFIG_KEY, False)))

    def is_test_mode_active(self) -> bool:
        return self._test_mode

    def require_test_mode(self, action: str) -> None:
        """Raise ``TestModeRequiredError`` unless the gate is open."""
        if not self._test_mode:
            raise TestModeRequiredError(action)

    def __repr__(self) -> str:
        return f"<EnvironmentGate test_mode={self._test_mode}>"
