"""Success/Failure result values.

The Result flavor of actions and dispatchers returns one of these instead of
raising. A Result is exactly one of ``Success`` (carrying the decoded value)
or ``Failure`` (carrying the exception that describes what went wrong).

Usage:
    result = dispatcher.invoke(GetUserResult("octocat"))
    if result.is_success:
        print(result.value.name)
    else:
        print(f"Failed: {result.message}")

    # Or chain dependent steps
    orgs = user_result.map(lambda user: user.orgs)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A successful outcome."""

    value: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        return Success(fn(self.value))

    def flat_map(self, fn: Callable[[T], Result[U]]) -> Result[U]:
        return fn(self.value)

    def map_failure(self, fn: Callable[[Exception], Exception]) -> Result[T]:
        return self

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def to_dict(self) -> dict[str, Any]:
        return {"status": "ok", "value": self.value}


@dataclass(frozen=True)
class Failure:
    """A failed outcome.

    Attributes:
        error: Exception describing the failure. For unsuccessful responses this
            is a RequestFailedError; for transport problems a TransportError.
    """

    error: Exception

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return getattr(self.error, "message", None) or str(self.error)

    @property
    def status_code(self) -> int | None:
        return getattr(self.error, "status_code", None)

    def map(self, fn: Callable[[Any], Any]) -> Failure:
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> Failure:
        return self

    def map_failure(self, fn: Callable[[Exception], Exception]) -> Failure:
        return Failure(fn(self.error))

    def unwrap(self) -> Any:
        """Raise the carried error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "status": "error",
            "error": type(self.error).__name__,
            "message": self.message,
        }
        if self.status_code is not None:
            d["status_code"] = self.status_code
        return d


Result = Union[Success[T], Failure]


def result_from(fn: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Call ``fn`` and capture its return value or raised exception."""
    try:
        return Success(fn(*args, **kwargs))
    except Exception as e:
        return Failure(e)
