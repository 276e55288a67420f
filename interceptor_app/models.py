"""
Data models for the mock interceptor.

This module defines the value objects that flow through the interceptor:
the HTTP verbs a mock may answer, the route definition itself, the
request the dispatcher receives and the canned response a responder
produces.  None of them is persisted; they live for one test run at most.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class HttpMethod(str, Enum):
    """Enumeration of the HTTP verbs a mock route may answer."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


def normalize_method(method: str | HttpMethod) -> str:
    """Return the upper-cased verb, or raise ValueError if it is not a known method."""
    value = method.value if isinstance(method, HttpMethod) else str(method).strip().upper()
    if value not in HttpMethod.__members__:
        valid = [m.value for m in HttpMethod]
        raise ValueError(f"Invalid method '{method}'. Must be one of: {valid}")
    return value


@dataclass(frozen=True)
class InterceptedRequest:
    """
    A single inbound call captured by the interceptor.

    Attributes:
        method: Upper-cased HTTP verb.
        path: Request path with the mock prefix stripped, always starting with "/".
        headers: Request headers.
        body: Raw request body.
        query: Query-string arguments (each key maps to a list of values).
        path_params: Values captured by ``<name>`` segments of a pattern route.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    query: Mapping[str, list[str]] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the body as JSON; an empty body decodes to None."""
        if not self.body:
            return None
        return json.loads(self.body)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the request to a JSON-friendly dictionary.

        The body is decoded as UTF-8 with replacement so binary payloads
        never break the call journal.
        """
        return {
            "method": self.method,
            "path": self.path,
            "headers": dict(self.headers),
            "body": self.body.decode("utf-8", errors="replace"),
            "query": {key: list(values) for key, values in self.query.items()},
            "path_params": dict(self.path_params),
        }


@dataclass(frozen=True)
class MockResponse:
    """Canned response returned by a responder."""

    status: int = 200
    body: Any = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    def body_bytes(self) -> bytes:
        """Serialise the body: bytes pass through, str is UTF-8 encoded, anything else becomes JSON."""
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")

    def content_type(self) -> str:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value
        if isinstance(self.body, (bytes, str)):
            return "text/plain; charset=utf-8"
        return "application/json"

    def json(self) -> Any:
        """Return the body decoded as JSON."""
        if isinstance(self.body, (bytes, str)):
            return json.loads(self.body)
        return self.body

    @classmethod
    def coerce(cls, result: Any) -> "MockResponse":
        """
        Normalise whatever a responder returned into a ``MockResponse``.

        Accepts a ``MockResponse``, a ``(status, body)`` tuple or a
        ``(status, body, headers)`` tuple.

        Raises:
            TypeError: If the result has any other shape.
        """
        if isinstance(result, MockResponse):
            return result
        if isinstance(result, tuple) and len(result) in (2, 3):
            status, body, *rest = result
            headers = rest[0] if rest else {}
            return cls(status=int(status), body=body, headers=dict(headers or {}))
        raise TypeError(
            f"Responder must return MockResponse or (status, body[, headers]), got {type(result).__name__}"
        )


Responder = Callable[[InterceptedRequest], Union[MockResponse, tuple]]


def json_response(data: Any, status: int = 200, headers: Mapping[str, str] | None = None) -> MockResponse:
    """Build a JSON ``MockResponse``."""
    merged = {"Content-Type": "application/json"}
    merged.update(headers or {})
    return MockResponse(status=status, body=data, headers=merged)


def text_response(text: str, status: int = 200, headers: Mapping[str, str] | None = None) -> MockResponse:
    """Build a plain-text ``MockResponse``."""
    merged = {"Content-Type": "text/plain; charset=utf-8"}
    merged.update(headers or {})
    return MockResponse(status=status, body=text, headers=merged)


def static_responder(response: MockResponse) -> Responder:
    """
    Wrap a fixed response in a responder callable.

    Every call returns the same ``response`` regardless of the request,
    which is what most route-based API mocks need.
    """

    def _respond(_: InterceptedRequest) -> MockResponse:
        return response

    return _respond
