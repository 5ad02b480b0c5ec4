from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

from courier import __version__
from courier.api_client import TypedApiClient
from courier.cli.main import app

runner = CliRunner()


def _patch_transport(monkeypatch: pytest.MonkeyPatch, handler) -> list[httpx.Request]:  # type: ignore[no-untyped-def]
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    original = TypedApiClient.from_settings.__func__  # type: ignore[attr-defined]

    def fake_from_settings(cls, settings, *, transport=None):  # type: ignore[no-untyped-def]
        return original(cls, settings, transport=httpx.MockTransport(recording))

    monkeypatch.setattr(
        "courier.cli.main.TypedApiClient.from_settings",
        classmethod(fake_from_settings),
    )
    return seen


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"courier {__version__}" in result.output


def test_call_prints_decoded_json(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={"login": "octo"}))

    result = runner.invoke(
        app,
        ["call", "get", "users/octo", "--base-url", "http://api.test", "-q", "sort=updated", "-H", "X-Trace: 1"],
    )

    assert result.exit_code == 0, result.output
    assert '"login": "octo"' in result.output
    request = seen[0]
    assert str(request.url) == "http://api.test/users/octo?sort=updated"
    assert request.headers["x-trace"] == "1"


def test_call_sends_json_body(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _patch_transport(monkeypatch, lambda request: httpx.Response(201))

    result = runner.invoke(
        app,
        ["call", "POST", "/user/register", "--base-url", "http://api.test", "-d", '{"username": "a"}'],
    )

    assert result.exit_code == 0, result.output
    assert "OK" in result.output
    assert json.loads(seen[0].content) == {"username": "a"}


def test_call_failure_exits_non_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    _patch_transport(monkeypatch, lambda request: httpx.Response(409, json={"error": "exists"}))

    result = runner.invoke(
        app,
        ["call", "POST", "/user/register", "--base-url", "http://api.test", "-d", "{}"],
    )

    assert result.exit_code == 1
    assert "HTTP 409: exists" in result.output


def test_call_sends_braces_in_path_literally(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={"ok": True}))

    result = runner.invoke(app, ["call", "get", "/users/{name}", "--base-url", "http://api.test"])

    assert result.exit_code == 0, result.output
    assert seen[0].url.raw_path == b"/users/%7Bname%7D"


def test_call_rejects_bad_input() -> None:
    bad_json = runner.invoke(app, ["call", "POST", "/x", "-d", "{nope"])
    body_on_get = runner.invoke(app, ["call", "GET", "/x", "-d", "{}"])
    bad_query = runner.invoke(app, ["call", "GET", "/x", "-q", "novalue"])

    assert bad_json.exit_code == 2
    assert body_on_get.exit_code == 2
    assert bad_query.exit_code == 2


def test_config_command_prints_resolved_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "courier.json"
    path.write_text(json.dumps({"timeout": 3}), encoding="utf-8")
    monkeypatch.setenv("COURIER_BASE_URL", "https://env.test")

    result = runner.invoke(app, ["config", "--config", str(path)])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["base_url"] == "https://env.test"
    assert payload["timeout"] == 3
    assert payload["http_log"] == "none"


def test_config_command_reports_config_errors(tmp_path: Path) -> None:
    path = tmp_path / "courier.json"
    path.write_text("[]", encoding="utf-8")

    result = runner.invoke(app, ["config", "--config", str(path)])

    assert result.exit_code == 2
    assert "must be an object" in result.output
