"""GitHub REST actions and the facades built on them.

Each call is an Action value; GitHubApi only turns method calls into
``dispatcher.invoke(...)``. Because the facade takes any Dispatcher, the same
code runs against the network, a StubDispatcher or a RecordingDispatcher.

Example:
    >>> api = GitHubApi(github_dispatcher(token="ghp_..."))
    >>> api.get_user("octocat")
    UserDetails(name='octocat', orgs=[])
    >>> api.get_latest_user("http4k", "http4k-connect")  # two dispatches
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from actionkit.action import Action, ResultAction, decode_or_raise, decode_result
from actionkit.dispatcher import Dispatcher, HttpDispatcher, ResultHttpDispatcher
from actionkit.errors import DecodeError
from actionkit.http.models import HTTPRequest, HTTPResponse
from actionkit.http.transport import HttpxTransport, Transport
from actionkit.result import Failure, Result

GITHUB_API_URL = "https://api.github.com"
GITHUB_MEDIA_TYPE = "application/vnd.github.v3+json"


@dataclass(frozen=True)
class UserDetails:
    name: str
    orgs: list[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> UserDetails:
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a user object, got {type(data).__name__}")
        login = data.get("login")
        if not isinstance(login, str):
            raise DecodeError(f"User object has no string login: {login!r}")
        orgs = [org["login"] if isinstance(org, dict) else str(org) for org in data.get("orgs") or []]
        return cls(name=login, orgs=orgs)


@dataclass(frozen=True)
class Commit:
    """Latest commit of a repository.

    ``author`` is the GitHub login of the commit author, or None when the
    commit email is not linked to any account.
    """

    sha: str
    author: str | None

    @classmethod
    def from_json(cls, data: list[dict[str, Any]]) -> Commit:
        """Decode the first entry of a ``/commits`` listing."""
        if not isinstance(data, list):
            raise DecodeError(f"Expected a list of commits, got {type(data).__name__}")
        if not data:
            raise DecodeError("Repository has no commits")
        latest = data[0]
        login = (latest.get("author") or {}).get("login")
        if login is not None and not isinstance(login, str):
            raise DecodeError(f"Commit author has a non-string login: {login!r}")
        return cls(sha=latest["sha"], author=login)


def _segment(value: str) -> str:
    """Escape one path segment so field values cannot add path or query parts."""
    return quote(value, safe="")


def _user_path(username: str) -> str:
    return f"/users/{_segment(username)}"


def _commits_path(owner: str, repo: str) -> str:
    return f"/repos/{_segment(owner)}/{_segment(repo)}/commits"


def _unlinked_author(commit: Commit) -> DecodeError:
    return DecodeError(
        f"Commit {commit.sha} has no linked GitHub account",
        suggestions=["The commit email is not attached to any GitHub user"],
    )


def _decode_user(response: HTTPResponse) -> UserDetails:
    return UserDetails.from_json(response.json())


def _decode_commit(response: HTTPResponse) -> Commit:
    return Commit.from_json(response.json())


@dataclass(frozen=True)
class GetUser(Action[UserDetails]):
    username: str

    def to_request(self) -> HTTPRequest:
        return HTTPRequest("GET", _user_path(self.username))

    def from_response(self, response: HTTPResponse) -> UserDetails:
        return decode_or_raise(response, _decode_user)


@dataclass(frozen=True)
class GetRepoLatestCommit(Action[Commit]):
    owner: str
    repo: str

    def to_request(self) -> HTTPRequest:
        return HTTPRequest("GET", _commits_path(self.owner, self.repo)).with_query("per_page", 1)

    def from_response(self, response: HTTPResponse) -> Commit:
        return decode_or_raise(response, _decode_commit)


@dataclass(frozen=True)
class GetUserResult(ResultAction[UserDetails]):
    username: str

    def to_request(self) -> HTTPRequest:
        return HTTPRequest("GET", _user_path(self.username))

    def from_response(self, response: HTTPResponse) -> Result[UserDetails]:
        return decode_result(response, _decode_user)


@dataclass(frozen=True)
class GetRepoLatestCommitResult(ResultAction[Commit]):
    owner: str
    repo: str

    def to_request(self) -> HTTPRequest:
        return HTTPRequest("GET", _commits_path(self.owner, self.repo)).with_query("per_page", 1)

    def from_response(self, response: HTTPResponse) -> Result[Commit]:
        return decode_result(response, _decode_commit)


class GitHubApi:
    """Named operations over a raising-flavor dispatcher."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    def get_user(self, username: str) -> UserDetails:
        return self.dispatcher.invoke(GetUser(username))

    def get_latest_repo_commit(self, owner: str, repo: str) -> Commit:
        return self.dispatcher.invoke(GetRepoLatestCommit(owner, repo))

    def get_latest_user(self, owner: str, repo: str) -> UserDetails:
        """Details of whoever authored the repository's latest commit.

        Raises:
            DecodeError: If the latest commit has no linked GitHub account.
        """
        commit = self.get_latest_repo_commit(owner, repo)
        if commit.author is None:
            raise _unlinked_author(commit)
        return self.get_user(commit.author)


class GitHubResultApi:
    """Named operations over a Result-flavor dispatcher."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher

    def get_user(self, username: str) -> Result[UserDetails]:
        return self.dispatcher.invoke(GetUserResult(username))

    def get_latest_repo_commit(self, owner: str, repo: str) -> Result[Commit]:
        return self.dispatcher.invoke(GetRepoLatestCommitResult(owner, repo))

    def get_latest_user(self, owner: str, repo: str) -> Result[UserDetails]:
        return self.get_latest_repo_commit(owner, repo).flat_map(self._user_of)

    def _user_of(self, commit: Commit) -> Result[UserDetails]:
        if commit.author is None:
            return Failure(_unlinked_author(commit))
        return self.get_user(commit.author)


def github_headers(token: str | None = None) -> dict[str, str]:
    headers = {"Accept": GITHUB_MEDIA_TYPE}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def github_dispatcher(
    token: str | None = None,
    transport: Transport | None = None,
    *,
    result: bool = False,
) -> HttpDispatcher:
    """Base adapter pointed at api.github.com with the v3 media type."""
    dispatcher_cls = ResultHttpDispatcher if result else HttpDispatcher
    return dispatcher_cls(
        transport or HttpxTransport(),
        base_url=GITHUB_API_URL,
        headers=github_headers(token),
    )
