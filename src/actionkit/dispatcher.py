"""Dispatchers: the single entry point that turns an Action into its result.

``Dispatcher.invoke(action)`` is the only operation. HttpDispatcher drives an
action through a Transport; the decorators in ``actionkit.decorators`` wrap or
replace it without callers noticing.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from actionkit.action import Action, ResultAction
from actionkit.errors import ConfigValidationError, TransportError
from actionkit.http.models import HTTPRequest, merge_headers
from actionkit.http.transport import HttpxTransport, Transport
from actionkit.result import Failure, Result

if TYPE_CHECKING:
    from actionkit.config import ClientSettings

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Dispatcher(ABC):
    """Something that can take an ``Action[R]`` and produce an ``R``."""

    @abstractmethod
    def invoke(self, action: Action[R]) -> R:
        raise NotImplementedError

    def __call__(self, action: Action[R]) -> R:
        return self.invoke(action)


class HttpDispatcher(Dispatcher):
    """Base adapter bound to one Transport and fixed baseline decorations.

    ``invoke`` renders the action, applies the base URL and baseline headers
    (the action's own headers win on a name clash), makes exactly one
    transport call and decodes the response with the action itself. There are
    no retries and no caching at this layer.

    Example:
        >>> api = HttpDispatcher(
        ...     HttpxTransport(),
        ...     base_url="https://api.github.com",
        ...     headers={"Accept": "application/vnd.github.v3+json"},
        ... )
        >>> user = api.invoke(GetUser("octocat"))
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ConfigValidationError("Base URL cannot be empty", field="base_url", value=base_url)
        self.transport = transport
        self.base_url = base_url.strip().rstrip("/")
        self.headers: Mapping[str, str] = dict(headers or {})

    def prepare(self, request: HTTPRequest) -> HTTPRequest:
        """Apply the base URL and baseline headers to a rendered request."""
        path = request.path if request.path.startswith("/") else f"/{request.path}"
        return HTTPRequest(
            method=request.method.upper(),
            path=f"{self.base_url}{path}",
            query=request.query,
            headers=merge_headers(self.headers, request.headers),
            body=request.body,
        )

    def invoke(self, action: Action[R]) -> R:
        request = self.prepare(action.to_request())
        logger.debug("dispatching %s", request, extra={"action": action})
        response = self.transport.execute(request)
        return action.from_response(response)


class ResultHttpDispatcher(HttpDispatcher):
    """Result-flavor base adapter.

    Transport failures are captured as a Failure instead of raised, so callers
    branch on one value for every outcome.
    """

    def invoke(self, action: ResultAction[R]) -> Result[R]:  # type: ignore[override]
        request = self.prepare(action.to_request())
        logger.debug("dispatching %s", request, extra={"action": action})
        try:
            response = self.transport.execute(request)
        except TransportError as e:
            logger.warning("transport failed: %s", e.message, extra={"action": action})
            return Failure(e)
        return action.from_response(response)


def http_dispatcher(
    settings: ClientSettings,
    transport: Transport | None = None,
    *,
    result: bool = False,
) -> HttpDispatcher:
    """Build a base adapter from client settings.

    Args:
        settings: Base URL, timeout and baseline header configuration.
        transport: Transport to bind; defaults to an HttpxTransport using the
            configured timeout.
        result: Build the Result flavor instead of the raising flavor.
    """
    kwargs: dict[str, Any] = {
        "transport": transport or HttpxTransport(timeout=settings.timeout),
        "base_url": settings.base_url,
        "headers": settings.baseline_headers(),
    }
    if result:
        return ResultHttpDispatcher(**kwargs)
    return HttpDispatcher(**kwargs)
