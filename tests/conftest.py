"""Pytest fixtures for actionkit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from actionkit.errors import TransportError
from actionkit.github import GetRepoLatestCommit, GetUser
from actionkit.http.models import HTTPRequest, HTTPResponse

BASE_URL = "https://api.github.com"

OCTOCAT_JSON: dict[str, Any] = {
    "login": "octocat",
    "id": 583231,
    "name": "The Octocat",
    "type": "User",
}

COMMITS_JSON: list[dict[str, Any]] = [
    {
        "sha": "7fd1a60b01f91b314f59955a4e4d4e80d8edf11d",
        "commit": {"author": {"name": "The Octocat"}, "message": "Merge pull request #6"},
        "author": {"login": "octocat"},
    }
]


class MockTransport:
    """Transport double that records requests and serves a fixed response.

    Pass ``handler`` to compute the response per request, or ``error`` to
    raise it from every call.
    """

    def __init__(
        self,
        response: HTTPResponse | None = None,
        handler: Callable[[HTTPRequest], HTTPResponse] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.response = response or HTTPResponse.of_json(200, OCTOCAT_JSON)
        self.handler = handler
        self.error = error
        self.requests: list[HTTPRequest] = []

    def execute(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.handler is not None:
            return self.handler(request)
        return self.response

    @property
    def call_count(self) -> int:
        return len(self.requests)


def github_routes(request: HTTPRequest) -> HTTPResponse:
    """Serve the two GitHub endpoints the example actions use."""
    if request.path.endswith("/users/octocat"):
        return HTTPResponse.of_json(200, OCTOCAT_JSON)
    if request.path.endswith("/repos/octocat/hello-world/commits"):
        return HTTPResponse.of_json(200, COMMITS_JSON)
    return HTTPResponse.of_json(404, {"message": "Not Found"})


@pytest.fixture
def mock_transport() -> MockTransport:
    """Transport returning the octocat user for any request."""
    return MockTransport()


@pytest.fixture
def routing_transport() -> MockTransport:
    """Transport serving the GitHub user and commits endpoints."""
    return MockTransport(handler=github_routes)


@pytest.fixture
def failing_transport() -> MockTransport:
    """Transport that fails every request with a TransportError."""
    return MockTransport(error=TransportError("connection reset"))


@pytest.fixture
def sample_actions() -> list[Any]:
    """Mixed raising-flavor actions for determinism and recording checks."""
    return [
        GetUser("octocat"),
        GetUser("hubot"),
        GetRepoLatestCommit("octocat", "hello-world"),
        GetRepoLatestCommit("http4k", "http4k-connect"),
    ]


@pytest.fixture
def sample_responses() -> list[HTTPResponse]:
    """Responses covering success, error statuses and malformed bodies."""
    return [
        HTTPResponse.of_json(200, OCTOCAT_JSON),
        HTTPResponse.of_json(200, COMMITS_JSON),
        HTTPResponse.of_json(200, []),
        HTTPResponse.of_json(200, {"unexpected": True}),
        HTTPResponse.of_json(404, {"message": "Not Found"}),
        HTTPResponse.of_json(500, {"message": "Server Error"}),
        HTTPResponse(status_code=200, body=b"<html>not json</html>"),
        HTTPResponse(status_code=204),
    ]
