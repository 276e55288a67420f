"""Exception hierarchy for the mock interceptor."""

from __future__ import annotations


class InterceptorError(Exception):
    """Base class for every error raised by the interceptor."""


class TestModeRequiredError(InterceptorError):
    """Raised when mock machinery is built or used outside test mode."""

    __test__ = False  # keep pytest from collecting this as a test class

    def __init__(self, action: str):
        super().__init__(f"Cannot {action}: mock interceptor is only available in test mode")
        self.action = action


class DuplicateRouteError(InterceptorError):
    """Raised when a (method, path) pair is registered twice."""

    def __init__(self, method: str, path: str):
        super().__init__(f"Mock route already registered: {method} {path}")
        self.method = method
        self.path = path


class InvalidRouteError(InterceptorError):
    """Raised when a mock route definition is malformed."""


class ExternalApiError(InterceptorError):
    """Raised when a call to the external API fails or returns an error status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
