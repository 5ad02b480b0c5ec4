import httpx
import pytest
from pydantic import ValidationError

from courier.api_client import HttpLogLevel, Success, TransportConfig, TypedApiClient, logging_hooks
from courier.api_client.users import LOGIN, LoginRequest, Token
from courier.util.log import Log, LogFormat, LogLevel


def test_transport_config_is_frozen_and_validated() -> None:
    config = TransportConfig(base_url="https://api.test", timeout=5)

    assert config.default_headers == {}
    assert config.log_level == HttpLogLevel.NONE
    with pytest.raises(ValidationError):
        config.timeout = 10  # type: ignore[misc]
    with pytest.raises(ValidationError):
        TransportConfig(base_url="/relative")
    with pytest.raises(ValidationError):
        TransportConfig(base_url="ftp://files.test")
    with pytest.raises(ValidationError):
        TransportConfig(base_url="http://api.test", timeout=0)


def test_logging_hooks_none_level_has_no_hooks() -> None:
    assert logging_hooks("none") == {"request": [], "response": []}


def _login_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"access_token": "secret-token"}, headers={"set-cookie": "sid=1"})


@pytest.mark.anyio
async def test_basic_logging_writes_request_and_response_lines(capsys: pytest.CaptureFixture[str]) -> None:
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=False)
    config = TransportConfig(base_url="http://api.test", log_level="basic")

    async with TypedApiClient(config, transport=httpx.MockTransport(_login_handler)) as client:
        await client.call(LOGIN, LoginRequest(username="a", password="p"))

    err = capsys.readouterr().err
    assert 'msg="--> request"' in err
    assert 'msg="<-- response"' in err
    assert "status=200" in err
    assert "service=http" in err
    assert "headers=" not in err


@pytest.mark.anyio
async def test_body_logging_redacts_headers_and_still_decodes(capsys: pytest.CaptureFixture[str]) -> None:
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=False)
    config = TransportConfig(
        base_url="http://api.test",
        default_headers={"Authorization": "Bearer hunter2"},
        log_level=HttpLogLevel.BODY,
    )

    async with TypedApiClient(config, transport=httpx.MockTransport(_login_handler)) as client:
        result = await client.call(LOGIN, LoginRequest(username="a", password="p"))

    assert result == Success(Token(access_token="secret-token"))
    err = capsys.readouterr().err
    assert "hunter2" not in err
    assert "sid=1" not in err
    assert "secret-token" in err
    assert 'body={"username":"a","password":"p"}' in err
