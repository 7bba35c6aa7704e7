"""Exception hierarchy for actionkit.

Every error derives from ActionKitError and carries an ErrorCode, an
ErrorContext describing the action/request/response involved, and a list of
hints for fixing the problem.

Callers care about two families:

- TransportError and its subclasses come from a Transport when no response
  could be obtained (refused connection, timeout, DNS failure).
- RequestFailedError and DecodeError come from an action's decode step. The
  raising flavor raises them; the Result flavor returns them inside a Failure.

UnhandledActionError belongs to neither. It reports a StubDispatcher asked
for an action nobody stubbed.

Example:
    try:
        user = api.invoke(GetUser("octocat"))
    except RequestFailedError as e:
        print(e.format_verbose())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class ErrorCode(Enum):
    """Stable codes, grouped by hundreds.

    E0xx connection, E1xx request, E2xx validation and decoding, E3xx
    dispatch, E9xx anything else.
    """

    CONNECTION_FAILED = "E001"
    CONNECTION_TIMEOUT = "E002"
    CONNECTION_REFUSED = "E003"

    TRANSPORT_FAILED = "E100"
    REQUEST_TIMEOUT = "E101"
    REQUEST_FAILED = "E102"

    VALIDATION_FAILED = "E201"
    INVALID_CONFIG = "E202"
    DECODE_FAILED = "E205"

    UNHANDLED_ACTION = "E301"

    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.value[1], "unknown")


_CATEGORIES = {"0": "connection", "1": "request", "2": "validation", "3": "dispatch"}


@dataclass
class ErrorContext:
    """Where an error happened.

    ``action`` is the repr of the action being dispatched; ``request`` and
    ``response`` hold small summaries such as ``{"method", "path"}`` and
    ``{"status", "body"}``.
    """

    action: str | None = None
    request: dict[str, Any] | None = None
    response: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"timestamp": self.timestamp.isoformat(), "extra": self.extra}
        for name in ("action", "request", "response"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


class ActionKitError(Exception):
    """Base class for actionkit errors.

    Subclasses set ``error_code``, ``default_message`` and ``hints``. Keyword
    arguments beyond the named ones land in ``context.extra``.
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: ClassVar[str] = "actionkit error"
    hints: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra: Any,
    ) -> None:
        self.message = message or self.default_message
        if error_code is not None:
            self.error_code = error_code
        self.context = context if context is not None else ErrorContext()
        self.context.extra.update(extra)
        self.cause = cause
        self._suggestions = suggestions
        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Steps that usually resolve this error; a fresh list on every access."""
        if self._suggestions is not None:
            return list(self._suggestions)
        return list(self.hints)

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def format_verbose(self) -> str:
        """Multi-line report: code, message, context summary, suggestions."""
        ctx = self.context
        lines = [f"Error [{self.error_code.value}]: {self.message}"]
        if ctx.action:
            lines.append(f"Action: {ctx.action}")
        if ctx.request:
            lines.append(f"Request: {ctx.request.get('method', '?')} {ctx.request.get('path', '?')}")
        if ctx.response:
            lines.append(f"Response: HTTP {ctx.response.get('status', '?')}")
        suggestions = self.suggestions
        if suggestions:
            lines += ["", "Suggestions:"] + [f"  - {s}" for s in suggestions]
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "error_type": type(self).__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": None if self.cause is None else str(self.cause),
        }


class TransportError(ActionKitError):
    """No response was obtained for a request.

    An unsuccessful HTTP status is not a transport error; it reaches the
    action's decode step like any other response.
    """

    error_code = ErrorCode.TRANSPORT_FAILED
    default_message = "Transport failed to execute request"
    hints = (
        "Verify the target host is reachable",
        "Check base_url in your configuration",
    )


class ConnectionError(TransportError):
    error_code = ErrorCode.CONNECTION_FAILED
    default_message = "Could not connect to the API"
    hints = (
        "Verify the API is reachable (try: curl <base_url>)",
        "Ensure no firewall or proxy is blocking the connection",
    )


class ConnectionTimeoutError(ConnectionError):
    error_code = ErrorCode.CONNECTION_TIMEOUT
    default_message = "Timed out while connecting"
    hints = (
        "Increase the timeout setting (ACTIONKIT_TIMEOUT)",
        "Check network connectivity to the API host",
    )


class ConnectionRefusedError(ConnectionError):
    """Connection refused, or the host name did not resolve."""

    error_code = ErrorCode.CONNECTION_REFUSED
    default_message = "Connection refused"
    hints = (
        "Check the host and port in base_url",
        "Check the host name in base_url resolves",
    )


class RequestTimeoutError(TransportError):
    """Connected, but no response arrived in time."""

    error_code = ErrorCode.REQUEST_TIMEOUT
    default_message = "Timed out waiting for a response"
    hints = (
        "Increase the timeout setting (ACTIONKIT_TIMEOUT)",
        "The endpoint may be slow for large result pages",
    )


_STATUS_HINTS: dict[int, tuple[str, ...]] = {
    401: (
        "Verify the token is valid and not expired",
        "Check ACTIONKIT_TOKEN or the token in your config file",
    ),
    403: (
        "Check the token has the scopes this endpoint requires",
        "You may have hit a rate limit; inspect the X-RateLimit-* headers",
    ),
    404: (
        "Verify the resource identifiers in the action",
        "Private resources answer 404 to unauthenticated requests",
    ),
    422: (
        "Read the validation errors in the response body",
        "Check the request fields against the API documentation",
    ),
}


def status_hints(status_code: int) -> list[str]:
    """Suggestions for an unsuccessful HTTP status."""
    if status_code in _STATUS_HINTS:
        return list(_STATUS_HINTS[status_code])
    if 500 <= status_code < 600:
        return ["This is a server-side error; retry later or check the service status"]
    return [f"The API answered HTTP {status_code}; the response body may explain why"]


class RequestFailedError(ActionKitError):
    """The API answered with an unsuccessful status code."""

    error_code = ErrorCode.REQUEST_FAILED
    default_message = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None, **kwargs: Any) -> None:
        self.status_code = status_code
        if status_code is not None:
            kwargs.setdefault("suggestions", status_hints(status_code))
        super().__init__(message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "status_code": self.status_code}


class ValidationError(ActionKitError):
    """A value was rejected; ``field`` names it when known."""

    error_code = ErrorCode.VALIDATION_FAILED
    default_message = "Invalid value"
    hints = ("Check the field and value named in the error",)

    def __init__(self, message: str | None = None, field: str | None = None, value: Any = None, **kwargs: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(message, **kwargs)

    def __str__(self) -> str:
        text = super().__str__()
        return f"{text} (field: {self.field})" if self.field else text

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field, "value": repr(self.value)}


class ConfigValidationError(ValidationError):
    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid client configuration"
    hints = ("Check the YAML config file and the ACTIONKIT_* environment variables",)


class DecodeError(ActionKitError):
    """A response body did not match what the action expected."""

    error_code = ErrorCode.DECODE_FAILED
    default_message = "Could not decode response body"
    hints = (
        "Check the API returned the expected content type",
        "Compare the response body with the action's decoder",
    )


class UnhandledActionError(ActionKitError):
    """A StubDispatcher got an action its table has no entry for.

    Raised in both flavors; it is a test-setup defect, never a Failure.
    """

    error_code = ErrorCode.UNHANDLED_ACTION
    default_message = "No stub configured for action"
    hints = (
        "Add the action to the StubTable used to build the StubDispatcher",
        "Stub keys compare every field, so check the values match exactly",
    )

    def __init__(self, action: Any, message: str | None = None, **kwargs: Any) -> None:
        self.action = action
        kwargs.setdefault("context", ErrorContext(action=repr(action)))
        super().__init__(message or f"No stub configured for action {action!r}", **kwargs)
