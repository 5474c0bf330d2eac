"""
Tests for the requests based API client.
A stub session records outgoing requests and returns canned responses.
"""

from __future__ import annotations

import json
from typing import Any

import requests

from meals_finder_client import MealsFinderAPI


def _response(status_code: int, body: Any = None, url: str = "http://api.test") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.url = url
    response._content = b"" if body is None else json.dumps(body).encode("utf-8")
    return response


class StubSession:
    def __init__(self, *responses: requests.Response) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> requests.Response:
        self.calls.append(kwargs)
        return self.responses.pop(0)


class BrokenSession:
    def request(self, **_: Any) -> requests.Response:
        raise requests.ConnectionError("connection refused")


def test_login_stores_token_for_later_calls() -> None:
    session = StubSession(
        _response(200, {"access_token": "tok", "token_type": "bearer"}),
        _response(200, {"username": "alice", "email": "alice@example.com"}),
    )
    api = MealsFinderAPI(base_url="http://api.test/", session=session)

    token, error = api.login("alice", "pw1-secret")
    profile, _ = api.get_profile()

    assert (token, error) == ("tok", None)
    assert profile["username"] == "alice"
    assert session.calls[0]["url"] == "http://api.test/api/v1/users/login"
    assert session.calls[0]["json"] == {"login": "alice", "password": "pw1-secret"}
    assert "Authorization" not in session.calls[0]["headers"]
    assert session.calls[1]["headers"]["Authorization"] == "Bearer tok"


def test_http_errors_are_returned_not_raised() -> None:
    session = StubSession(_response(401, {"detail": "Invalid credentials"}))
    api = MealsFinderAPI(base_url="http://api.test", session=session)

    token, error = api.login("alice", "wrong")

    assert token is None
    assert error == {"status_code": 401, "message": "Invalid credentials"}
    assert api.token is None


def test_validation_problems_are_passed_through() -> None:
    problems = ["email is not a valid address"]
    session = StubSession(_response(422, {"detail": problems}))
    api = MealsFinderAPI(base_url="http://api.test", session=session)

    data, error = api.register_user({"username": "alice", "password": "pw1-secret", "email": "nope"})

    assert data is None
    assert error["message"] == problems


def test_connection_errors_are_reported() -> None:
    api = MealsFinderAPI(base_url="http://api.test", session=BrokenSession())

    tags, error = api.list_tags()

    assert tags == []
    assert error["status_code"] is None
    assert "connection refused" in error["message"]


def test_tag_calls() -> None:
    session = StubSession(
        _response(201, {"status": "created"}),
        _response(200, [{"name": "vegan", "tag_type": "diet"}]),
        _response(204),
    )
    api = MealsFinderAPI(base_url="http://api.test", token="tok", session=session)

    assert api.add_tag("vegan", "diet") == ({"status": "created"}, None)
    assert api.list_tags() == ([{"name": "vegan", "tag_type": "diet"}], None)
    assert api.delete_tag("vegan food") == (True, None)
    assert session.calls[0]["method"] == "POST"
    assert session.calls[2]["method"] == "DELETE"
    assert session.calls[2]["url"].endswith("/me/tags/vegan%20food")


def test_update_settings_uses_put() -> None:
    session = StubSession(_response(200, {"status": "updated"}))
    api = MealsFinderAPI(base_url="http://api.test", token="tok", session=session)

    assert api.update_settings({"email": "a@example.com"}) == ({"status": "updated"}, None)
    assert session.calls[0]["method"] == "PUT"
    assert session.calls[0]["url"] == "http://api.test/api/v1/users/me/settings"
