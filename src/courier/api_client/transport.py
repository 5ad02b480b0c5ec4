"""Transport collaborator: shared httpx configuration and logging hooks."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..util.log import Log

log = Log.create({"service": "http"})

DEFAULT_USER_AGENT = "courier/0.1"
REDACTED = "██"


class HttpLogLevel(str, Enum):
    """How much of each exchange the HTTP hooks log."""

    NONE = "none"
    BASIC = "basic"
    HEADERS = "headers"
    BODY = "body"


class TransportConfig(BaseModel):
    """Immutable transport settings, fixed when a client is constructed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str
    default_headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    log_level: HttpLogLevel = HttpLogLevel.NONE

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(str(e)) from e
        if url.scheme not in {"http", "https"} or not url.host:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value


def build_async_client(
    config: TransportConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    redact_headers: Iterable[str] = ("authorization", "cookie", "set-cookie"),
) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient`` for a config record."""
    headers: dict[str, str] = {
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "application/json",
    }
    headers.update(config.default_headers)
    return httpx.AsyncClient(
        base_url=config.base_url,
        transport=transport,
        timeout=httpx.Timeout(config.timeout),
        follow_redirects=config.follow_redirects,
        headers=headers,
        event_hooks=logging_hooks(config.log_level, redact_headers=redact_headers),
    )


def _headers(headers: httpx.Headers, redact: frozenset[str]) -> dict[str, str]:
    return {key: REDACTED if key.lower() in redact else value for key, value in headers.items()}


def _body_text(content: bytes, limit: int = 4096) -> str:
    text = content.decode("utf-8", errors="replace")
    if len(text) > limit:
        return text[:limit] + f"...(+{len(text) - limit} chars)"
    return text


def logging_hooks(
    level: HttpLogLevel | str,
    *,
    redact_headers: Iterable[str] = ("authorization", "cookie", "set-cookie"),
) -> dict[str, list[Callable[[Any], Awaitable[None]]]]:
    """Build httpx ``event_hooks`` that log each request and response.

    ``basic`` logs method, URL, status and duration; ``headers`` adds headers
    (sensitive ones redacted); ``body`` also reads and logs response bodies.
    """
    level = HttpLogLevel(level)
    if level == HttpLogLevel.NONE:
        return {"request": [], "response": []}
    redact = frozenset(name.lower() for name in redact_headers)
    with_headers = level in {HttpLogLevel.HEADERS, HttpLogLevel.BODY}

    async def on_request(request: httpx.Request) -> None:
        request.extensions["courier.started"] = time.monotonic()
        extra: dict[str, Any] = {"method": request.method, "url": str(request.url)}
        if with_headers:
            extra["headers"] = _headers(request.headers, redact)
        if level == HttpLogLevel.BODY and request.content:
            extra["body"] = _body_text(request.content)
        log.info("--> request", extra)

    async def on_response(response: httpx.Response) -> None:
        request = response.request
        started = request.extensions.get("courier.started")
        extra: dict[str, Any] = {
            "method": request.method,
            "url": str(request.url),
            "status": response.status_code,
        }
        if isinstance(started, float):
            extra["duration"] = int((time.monotonic() - started) * 1000)
        if with_headers:
            extra["headers"] = _headers(response.headers, redact)
        if level == HttpLogLevel.BODY:
            await response.aread()
            extra["body"] = _body_text(response.content)
        log.info("<-- response", extra)

    return {"request": [on_request], "response": [on_response]}
