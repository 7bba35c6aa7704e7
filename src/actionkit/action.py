"""Action contract.

An Action describes one API call: how to render it as an HTTPRequest and how
to decode the HTTPResponse into a typed result. Actions are frozen
dataclasses, so two actions with the same type and fields are equal and hash
the same; stub tables and recording logs rely on that.

Raising flavor:

    @dataclass(frozen=True)
    class GetUser(Action[UserDetails]):
        username: str

        def to_request(self) -> HTTPRequest:
            return HTTPRequest("GET", f"/users/{self.username}")

        def from_response(self, response: HTTPResponse) -> UserDetails:
            return UserDetails.from_json(expect_success(response).json())

Result flavor:

    @dataclass(frozen=True)
    class GetUserResult(ResultAction[UserDetails]):
        username: str

        def to_request(self) -> HTTPRequest:
            return HTTPRequest("GET", f"/users/{self.username}")

        def from_response(self, response: HTTPResponse) -> Result[UserDetails]:
            return decode_result(response, lambda r: UserDetails.from_json(r.json()))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from actionkit.errors import DecodeError, ErrorContext, RequestFailedError
from actionkit.http.models import HTTPRequest, HTTPResponse
from actionkit.result import Failure, Result, Success

R = TypeVar("R")
T = TypeVar("T")


class Action(ABC, Generic[R]):
    """A typed, side-effect-free API call.

    Implementations must not perform I/O or keep mutable state: decorators may
    call ``to_request`` and ``from_response`` any number of times.
    """

    @abstractmethod
    def to_request(self) -> HTTPRequest:
        """Render this action as a request relative to the API base URL."""
        raise NotImplementedError

    @abstractmethod
    def from_response(self, response: HTTPResponse) -> R:
        """Decode a response into this action's result type.

        In the raising flavor an unsuccessful response raises
        RequestFailedError.
        """
        raise NotImplementedError


class ResultAction(Action[Result[R]]):
    """Action whose decode step returns a Success or Failure and never raises."""

    @abstractmethod
    def from_response(self, response: HTTPResponse) -> Result[R]:
        raise NotImplementedError


def _request_failed(response: HTTPResponse) -> RequestFailedError:
    return RequestFailedError(
        f"API returned: {response.status_code}",
        status_code=response.status_code,
        context=ErrorContext(response={"status": response.status_code, "body": response.text[:200]}),
    )


def expect_success(response: HTTPResponse) -> HTTPResponse:
    """Return ``response`` unchanged, or raise if its status is unsuccessful.

    Raises:
        RequestFailedError: For any non-2xx status.
    """
    if not response.successful:
        raise _request_failed(response)
    return response


# Exceptions a decoder raises when the body has an unexpected shape.
DECODE_FAULTS: tuple[type[Exception], ...] = (AttributeError, KeyError, IndexError, TypeError, ValueError)


def _decode_failed(response: HTTPResponse, error: Exception) -> DecodeError:
    return DecodeError(
        f"Unexpected response body: {error!r}",
        context=ErrorContext(response={"status": response.status_code, "body": response.text[:200]}),
        cause=error,
    )


def decode_or_raise(response: HTTPResponse, decoder: Callable[[HTTPResponse], T]) -> T:
    """Raising-flavor decode.

    Raises:
        RequestFailedError: For any non-2xx status.
        DecodeError: If ``decoder`` trips over an unexpected body.
    """
    expect_success(response)
    try:
        return decoder(response)
    except DECODE_FAULTS as e:
        raise _decode_failed(response, e) from e


def decode_result(response: HTTPResponse, decoder: Callable[[HTTPResponse], T]) -> Result[T]:
    """Decode a response into a Result without raising.

    Unsuccessful statuses become a Failure carrying RequestFailedError. A
    decoder that trips over an unexpected body becomes a Failure carrying
    DecodeError.
    """
    if not response.successful:
        return Failure(_request_failed(response))
    try:
        return Success(decoder(response))
    except DecodeError as e:
        return Failure(e)
    except DECODE_FAULTS as e:
        return Failure(_decode_failed(response, e))
