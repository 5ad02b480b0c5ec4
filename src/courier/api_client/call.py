"""Single-use prepared calls with callback delivery and cancellation."""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, Mapping, TypeVar, Union

import httpx

from .endpoint import Endpoint
from .result import Result

if TYPE_CHECKING:
    from .client import TypedApiClient

T = TypeVar("T")

Callback = Callable[[Result[T]], Union[None, Awaitable[None]]]


class Call(Generic[T]):
    """One prepared invocation of an endpoint.

    A call runs at most once, either awaited through :meth:`execute` or
    scheduled with :meth:`enqueue`. Use :meth:`clone` to repeat it.
    """

    def __init__(
        self,
        client: "TypedApiClient",
        endpoint: Endpoint[T],
        payload: Any = None,
        *,
        path: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._payload = payload
        self._path = dict(path or {})
        self._query = dict(query or {})
        self._headers = dict(headers or {})
        self._request = client.build_request(
            endpoint,
            payload,
            path=self._path,
            query=self._query,
            headers=self._headers,
        )
        self._executed = False
        self._canceled = False
        self._task: asyncio.Task[Any] | None = None

    @property
    def endpoint(self) -> Endpoint[T]:
        return self._endpoint

    @property
    def request(self) -> httpx.Request:
        return self._request

    @property
    def is_executed(self) -> bool:
        return self._executed

    @property
    def is_canceled(self) -> bool:
        return self._canceled

    def _claim(self) -> None:
        if self._executed:
            raise RuntimeError("Already executed")
        self._executed = True

    async def execute(self) -> Result[T]:
        """Send the request and wait for its result.

        :meth:`cancel` from another task interrupts the send; the awaiting
        task then sees ``CancelledError`` instead of a result.
        """
        loop = asyncio.get_running_loop()
        self._claim()
        if self._canceled:
            raise asyncio.CancelledError(f"call {self._endpoint.name!r} was cancelled")
        self._task = loop.create_task(
            self._client.send(self._endpoint, self._request),
            name=f"courier:{self._endpoint.name}",
        )
        return await self._task

    def enqueue(self, callback: Callback[T]) -> asyncio.Task[None]:
        """Run the call in the background and hand its result to ``callback``.

        The callback receives exactly one ``Result``, or nothing at all if the
        call is cancelled first. Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._claim()

        async def deliver() -> None:
            result = await self._client.send(self._endpoint, self._request)
            outcome = callback(result)
            if inspect.isawaitable(outcome):
                await outcome

        self._task = loop.create_task(deliver(), name=f"courier:{self._endpoint.name}")
        if self._canceled:
            self._task.cancel()
        return self._task

    def cancel(self) -> None:
        """Cancel the call. Safe to call at any time, any number of times."""
        self._canceled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def clone(self) -> "Call[T]":
        return Call(
            self._client,
            self._endpoint,
            self._payload,
            path=self._path,
            query=self._query,
            headers=self._headers,
        )

    def __repr__(self) -> str:
        state = "canceled" if self._canceled else "executed" if self._executed else "new"
        return f"<Call {self._endpoint} {state}>"
