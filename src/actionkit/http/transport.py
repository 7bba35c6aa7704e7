"""Transport boundary and its httpx-backed implementation.

A Transport executes one HTTPRequest and returns the HTTPResponse, or raises
a TransportError when no response could be obtained. Status codes are not
interpreted here; decoding them is the action's job.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol, runtime_checkable

import httpx

from actionkit.errors import (
    ConnectionRefusedError,
    ConnectionTimeoutError,
    ErrorContext,
    RequestTimeoutError,
    TransportError,
)
from actionkit.http.models import HTTPRequest, HTTPResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a request and hand back the response."""

    def execute(self, request: HTTPRequest) -> HTTPResponse:
        """Execute the request.

        Raises:
            TransportError: If the request could not be delivered.
        """
        ...


class HttpxTransport:
    """Transport backed by a shared ``httpx.Client``.

    Example:
        >>> with HttpxTransport(timeout=10.0) as transport:
        ...     response = transport.execute(HTTPRequest("GET", "https://example.com/"))

    Pass ``transport=httpx.MockTransport(handler)`` to serve responses from a
    function instead of the network.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, transport=transport)

    def execute(self, request: HTTPRequest) -> HTTPResponse:
        context = ErrorContext(request={"method": request.method, "path": request.path})
        start = time.perf_counter()
        try:
            outgoing = self._client.build_request(
                request.method,
                request.path,
                params=dict(request.query) or None,
                headers=dict(request.headers),
                content=request.body,
            )
            resp = self._client.send(outgoing)
        except (httpx.InvalidURL, UnicodeError) as e:
            raise TransportError(f"Request could not be encoded: {request}: {e}", context=context, cause=e) from e
        except httpx.ConnectTimeout as e:
            raise ConnectionTimeoutError(f"Connection timed out: {request}", context=context, cause=e) from e
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request timed out: {request}", context=context, cause=e) from e
        except httpx.ConnectError as e:
            raise ConnectionRefusedError(f"Could not connect: {request}: {e}", context=context, cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {request}: {e}", context=context, cause=e) from e
        duration_ms = (time.perf_counter() - start) * 1000

        logger.debug("%s -> %d (%.1f ms)", request, resp.status_code, duration_ms)
        return HTTPResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.content,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
