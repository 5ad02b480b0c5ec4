from __future__ import annotations

import asyncio
import types
from typing import TYPE_CHECKING, Any, Mapping, TypeVar, Union, get_args, get_origin

import httpx

from ..util.log import Log
from .codec import Codec, DecodeError, JsonCodec
from .endpoint import Endpoint
from .result import ErrorKind, Failure, Result, Success
from .transport import TransportConfig, build_async_client

if TYPE_CHECKING:
    from ..core.config import ClientSettings
    from .call import Call

T = TypeVar("T")

log = Log.create({"service": "api_client"})

_NO_CONTENT = frozenset({204, 205})


def _admits_none(type_: Any) -> bool:
    origin = get_origin(type_)
    if origin is Union or origin is types.UnionType:
        return type(None) in get_args(type_)
    return type_ is Any


def _describe(error: BaseException) -> str:
    text = str(error).strip()
    return text or type(error).__name__


class TypedApiClient:
    """Executes declared endpoints and folds every outcome into a ``Result``.

    The client keeps no per-call state; one instance can be shared by any
    number of concurrent tasks. Transport failures, error statuses and
    undecodable bodies come back as :class:`Failure` values and are never
    raised. Cancelling the awaiting task propagates ``CancelledError`` and
    closes the in-flight response.
    """

    def __init__(
        self,
        config: TransportConfig,
        *,
        codec: Codec | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._codec: Codec = codec or JsonCodec()
        self._owns_client = client is None
        self._client = client or build_async_client(config, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: "ClientSettings",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TypedApiClient":
        return cls(settings.transport(), transport=transport)

    @property
    def codec(self) -> Codec:
        return self._codec

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TypedApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def build_request(
        self,
        endpoint: Endpoint[Any],
        payload: Any = None,
        *,
        path: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Build the wire request for ``endpoint``.

        Raises ``ValueError`` for calls that break the endpoint's declared
        shape. Nothing is sent.
        """
        if endpoint.expects_body and payload is None:
            raise ValueError(f"endpoint {endpoint.name!r} requires a payload")
        if not endpoint.expects_body and payload is not None:
            raise ValueError(f"endpoint {endpoint.name!r} does not take a payload")

        url = endpoint.render_path(path)
        request_headers = dict(headers or {})
        content: bytes | None = None
        if endpoint.expects_body:
            content = self._codec.encode(payload)
            if not any(key.lower() == "content-type" for key in request_headers):
                request_headers["Content-Type"] = self._codec.media_type

        params = {key: value for key, value in (query or {}).items() if value is not None}
        return self._client.build_request(
            endpoint.method.value,
            url,
            content=content,
            params=params or None,
            headers=request_headers or None,
        )

    async def call(
        self,
        endpoint: Endpoint[T],
        payload: Any = None,
        *,
        path: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Result[T]:
        request = self.build_request(endpoint, payload, path=path, query=query, headers=headers)
        return await self.send(endpoint, request)

    def new_call(
        self,
        endpoint: Endpoint[T],
        payload: Any = None,
        *,
        path: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> "Call[T]":
        """Prepare a single-use :class:`Call` without sending anything."""
        from .call import Call

        return Call(self, endpoint, payload, path=path, query=query, headers=headers)

    async def send(self, endpoint: Endpoint[T], request: httpx.Request) -> Result[T]:
        """Send a prepared request and interpret the response."""
        fields = {"endpoint": endpoint.name, "method": request.method, "path": request.url.path}
        log.debug("call", fields)

        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            return self._failed(Failure(ErrorKind.NETWORK, _describe(exc)), fields)
        except asyncio.CancelledError:
            log.debug("call cancelled", fields)
            raise

        try:
            body = await response.aread()
        except httpx.RequestError as exc:
            return self._failed(Failure(ErrorKind.NETWORK, _describe(exc)), fields)
        except asyncio.CancelledError:
            log.debug("call cancelled", fields)
            raise
        finally:
            await response.aclose()

        result = self._interpret(endpoint, response, body)
        if isinstance(result, Failure):
            return self._failed(result, fields)
        log.debug("call succeeded", {**fields, "status": response.status_code})
        return result

    def _interpret(self, endpoint: Endpoint[T], response: httpx.Response, body: bytes) -> Result[T]:
        if not response.is_success:
            return Failure(ErrorKind.HTTP_STATUS, response.text if body else "", status_code=response.status_code)

        if endpoint.returns_unit:
            return Success(None)  # type: ignore[arg-type]

        if not body.strip():
            if _admits_none(endpoint.response):
                return Success(None)  # type: ignore[arg-type]
            if response.status_code in _NO_CONTENT:
                return Failure(ErrorKind.DECODE, f"HTTP {response.status_code} has no content to decode")

        try:
            value = self._codec.decode(body, endpoint.response)
        except DecodeError as exc:
            return Failure(ErrorKind.DECODE, _describe(exc))
        return Success(value)

    @staticmethod
    def _failed(failure: Failure, fields: dict[str, Any]) -> Failure:
        log.warn(
            "call failed",
            {**fields, "reason": failure.reason.value, "status": failure.status_code, "detail": failure.detail},
        )
        return failure
