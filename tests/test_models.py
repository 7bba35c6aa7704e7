"""Tests for the HTTPRequest and HTTPResponse value types."""

from __future__ import annotations

import dataclasses

import pytest

from actionkit.errors import DecodeError
from actionkit.http.models import HTTPRequest, HTTPResponse, merge_headers


class TestMergeHeaders:
    def test_extra_headers_are_added(self) -> None:
        merged = merge_headers({"Accept": "a"}, {"X-Trace": "1"})
        assert merged == {"Accept": "a", "X-Trace": "1"}

    def test_override_is_case_insensitive(self) -> None:
        merged = merge_headers({"Accept": "application/json"}, {"accept": "text/plain"})
        assert merged == {"accept": "text/plain"}

    def test_inputs_are_not_mutated(self) -> None:
        base = {"Accept": "a"}
        merge_headers(base, {"Accept": "b"})
        assert base == {"Accept": "a"}


class TestHTTPRequest:
    def test_str_shows_method_and_path(self) -> None:
        assert str(HTTPRequest("GET", "/users/octocat")) == "GET /users/octocat"

    def test_is_immutable(self) -> None:
        request = HTTPRequest("GET", "/users/octocat")
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.path = "/users/hubot"  # type: ignore[misc]

    def test_with_query_returns_new_request(self) -> None:
        request = HTTPRequest("GET", "/repos/a/b/commits")
        updated = request.with_query("per_page", 1)

        assert request.query == {}
        assert updated.query == {"per_page": "1"}

    def test_with_header_replaces_existing_name(self) -> None:
        request = HTTPRequest("GET", "/", headers={"Accept": "a"}).with_header("ACCEPT", "b")
        assert request.header("accept") == "b"
        assert len(request.headers) == 1

    def test_header_lookup_missing_returns_none(self) -> None:
        assert HTTPRequest("GET", "/").header("Authorization") is None

    def test_with_json_sets_body_and_content_type(self) -> None:
        request = HTTPRequest("POST", "/gists").with_json({"b": 2, "a": 1})

        assert request.body == b'{"a":1,"b":2}'
        assert request.header("content-type") == "application/json"

    def test_equal_values_are_equal(self) -> None:
        first = HTTPRequest("GET", "/users/octocat").with_query("x", "1")
        second = HTTPRequest("GET", "/users/octocat").with_query("x", "1")
        assert first == second

    def test_equal_values_hash_equal(self) -> None:
        first = HTTPRequest("GET", "/users/octocat", headers={"Accept": "a"}).with_query("x", "1")
        second = HTTPRequest("GET", "/users/octocat", headers={"Accept": "a"}).with_query("x", "1")

        assert hash(first) == hash(second)
        assert {first: "cached"}[second] == "cached"

    def test_source_mappings_are_copied(self) -> None:
        query = {"per_page": "1"}
        headers = {"Accept": "a"}
        request = HTTPRequest("GET", "/repos/a/b/commits", query=query, headers=headers)

        query["per_page"] = "100"
        headers["Authorization"] = "Bearer leaked"

        assert request.query == {"per_page": "1"}
        assert request.headers == {"Accept": "a"}

    def test_mappings_are_read_only(self) -> None:
        request = HTTPRequest("GET", "/", query={"x": "1"}, headers={"Accept": "a"})

        with pytest.raises(TypeError):
            request.headers["Authorization"] = "Bearer x"  # type: ignore[index]
        with pytest.raises(TypeError):
            request.query["x"] = "2"  # type: ignore[index]


class TestHTTPResponse:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_2xx_is_successful(self, status: int) -> None:
        assert HTTPResponse(status_code=status).successful

    @pytest.mark.parametrize("status", [100, 301, 304, 400, 404, 500, 503])
    def test_other_statuses_are_not_successful(self, status: int) -> None:
        response = HTTPResponse(status_code=status)
        assert not response.successful
        assert not response.ok

    def test_json_parses_body(self) -> None:
        response = HTTPResponse(status_code=200, body=b'{"login": "octocat"}')
        assert response.json() == {"login": "octocat"}

    def test_json_invalid_body_raises_decode_error(self) -> None:
        response = HTTPResponse(status_code=200, body=b"<html></html>")
        with pytest.raises(DecodeError) as exc_info:
            response.json()

        assert exc_info.value.context.response == {"status": 200, "body": "<html></html>"}

    def test_json_empty_body_raises_decode_error(self) -> None:
        with pytest.raises(DecodeError):
            HTTPResponse(status_code=204).json()

    def test_of_json(self) -> None:
        response = HTTPResponse.of_json(201, {"id": 1}, headers={"ETag": "abc"})

        assert response.status_code == 201
        assert response.json() == {"id": 1}
        assert response.headers == {"ETag": "abc", "Content-Type": "application/json"}

    def test_text_replaces_invalid_utf8(self) -> None:
        assert HTTPResponse(status_code=200, body=b"ok\xff").text == "ok\ufffd"
