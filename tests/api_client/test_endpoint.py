from enum import Enum

import pytest

from courier.api_client import Endpoint, HttpMethod


class Sort(str, Enum):
    UPDATED = "updated"


def test_endpoint_collects_path_params() -> None:
    endpoint = Endpoint("repo", HttpMethod.GET, "/repos/{owner}/{repo}")

    assert endpoint.params == ("owner", "repo")
    assert endpoint.returns_unit
    assert str(endpoint) == "GET /repos/{owner}/{repo}"


def test_endpoint_accepts_method_strings() -> None:
    endpoint = Endpoint("create", "POST", "/items", expects_body=True)

    assert endpoint.method is HttpMethod.POST


def test_render_path_quotes_each_value_as_one_segment() -> None:
    endpoint = Endpoint("user", HttpMethod.GET, "/users/{username}/{kind}")

    assert endpoint.render_path({"username": "a b/c", "kind": Sort.UPDATED}) == "/users/a%20b%2Fc/updated"
    assert endpoint.render_path({"username": 42, "kind": "x"}) == "/users/42/x"


def test_render_path_rejects_missing_and_unknown_params() -> None:
    endpoint = Endpoint("user", HttpMethod.GET, "/users/{username}")

    with pytest.raises(ValueError, match="missing path parameter"):
        endpoint.render_path({})
    with pytest.raises(ValueError, match="unknown path parameter"):
        endpoint.render_path({"username": "a", "other": "b"})
    with pytest.raises(ValueError, match="is None"):
        endpoint.render_path({"username": None})


@pytest.mark.parametrize(
    ("method", "path", "expects_body", "message"),
    [
        (HttpMethod.GET, "/items", True, "cannot carry a body"),
        (HttpMethod.DELETE, "/items/{id}", True, "cannot carry a body"),
        (HttpMethod.GET, "items", False, "must start with"),
        (HttpMethod.GET, "/items/{id}/{id}", False, "duplicate path parameter"),
        (HttpMethod.GET, "/items/{id", False, "malformed path template"),
    ],
)
def test_endpoint_rejects_invalid_declarations(
    method: HttpMethod,
    path: str,
    expects_body: bool,
    message: str,
) -> None:
    with pytest.raises(ValueError, match=message):
        Endpoint("bad", method, path, expects_body=expects_body)


def test_endpoints_are_immutable_and_hashable() -> None:
    endpoint = Endpoint("user", HttpMethod.GET, "/users/{username}", response=list[int])

    with pytest.raises(AttributeError):
        endpoint.path = "/other"  # type: ignore[misc]
    assert {endpoint: 1}[Endpoint("user", HttpMethod.GET, "/users/{username}", response=list[int])] == 1
