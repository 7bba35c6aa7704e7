"""HTTPRequest and HTTPResponse value types.

Actions render HTTPRequest values and decode HTTPResponse values. Both are
immutable; the builder helpers on HTTPRequest return new instances so an
action's ``to_request()`` stays free of side effects.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from actionkit.errors import DecodeError, ErrorContext


def merge_headers(base: Mapping[str, str], extra: Mapping[str, str]) -> dict[str, str]:
    """Merge header mappings; names in ``extra`` replace ``base`` case-insensitively."""
    overridden = {name.lower() for name in extra}
    merged = {name: value for name, value in base.items() if name.lower() not in overridden}
    merged.update(extra)
    return merged


@dataclass(frozen=True)
class HTTPRequest:
    """Represents an HTTP request relative to a dispatcher's base URL."""

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None

    def __post_init__(self) -> None:
        # stored read-only
        object.__setattr__(self, "query", MappingProxyType(dict(self.query)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def __hash__(self) -> int:
        return hash(
            (self.method, self.path, frozenset(self.query.items()), frozenset(self.headers.items()), self.body)
        )

    def __str__(self) -> str:
        return f"{self.method} {self.path}"

    def with_query(self, name: str, value: Any) -> HTTPRequest:
        return replace(self, query={**self.query, name: str(value)})

    def with_header(self, name: str, value: str) -> HTTPRequest:
        return self.with_headers({name: value})

    def with_headers(self, headers: Mapping[str, str]) -> HTTPRequest:
        return replace(self, headers=merge_headers(self.headers, headers))

    def with_json(self, payload: Any) -> HTTPRequest:
        """Return a copy carrying ``payload`` as a JSON body."""
        body = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        return replace(
            self,
            body=body,
            headers=merge_headers(self.headers, {"Content-Type": "application/json"}),
        )

    def header(self, name: str) -> str | None:
        """Look up a header value by case-insensitive name."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class HTTPResponse:
    """Represents an HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def successful(self) -> bool:
        return self.ok

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            DecodeError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(
                f"Response body is not valid JSON: {e}",
                context=ErrorContext(
                    response={"status": self.status_code, "body": self.text[:200]},
                ),
                cause=e,
            ) from e

    @classmethod
    def of_json(cls, status_code: int, payload: Any, headers: Mapping[str, str] | None = None) -> HTTPResponse:
        """Build a response carrying ``payload`` as a JSON body."""
        return cls(
            status_code=status_code,
            headers=merge_headers(headers or {}, {"Content-Type": "application/json"}),
            body=json.dumps(payload).encode("utf-8"),
        )
