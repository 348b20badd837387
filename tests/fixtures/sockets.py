"""Scripted in-memory sockets.

``FakeSocket`` satisfies the ``SocketConnection`` protocol: tests push
inbound frames, close it from the "server" side, or make it fail, and
inspect what the client transmitted.
"""

import asyncio
from collections.abc import AsyncIterator

from domain.exceptions import NotConnectedError, TransportError

_CLOSED = object()


class FakeSocket:
    """An open socket driven by the test."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.sent: list[str] = []
        self.closed = False
        self.fail_send = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self._inbound: asyncio.Queue = asyncio.Queue()

    async def send(self, frame: str) -> None:
        if self.fail_send or self.closed:
            raise NotConnectedError()
        self.sent.append(frame)

    async def frames(self) -> AsyncIterator[str | bytes]:
        while True:
            item = await self._inbound.get()
            if item is _CLOSED:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.close_code is None:
            self.close_code = 1000
        self._inbound.put_nowait(_CLOSED)

    # Test controls

    def push(self, *frames: str | bytes) -> None:
        for frame in frames:
            self._inbound.put_nowait(frame)

    def server_close(self, code: int = 1000, reason: str = "") -> None:
        self.close_code = code
        self.close_reason = reason
        self._inbound.put_nowait(_CLOSED)

    def drop(self, message: str = "Connection lost") -> None:
        self.close_code = 1006
        self._inbound.put_nowait(TransportError(message))


class FakeConnector:
    """A ``SocketConnector`` recording every URL it was asked to open.

    Args:
        error: Raised on every open attempt when set
        hold: When set, each open attempt waits for this event first
    """

    def __init__(self, error: Exception | None = None, hold: asyncio.Event | None = None) -> None:
        self.error = error
        self.hold = hold
        self.urls: list[str] = []
        self.sockets: list[FakeSocket] = []

    @property
    def socket(self) -> FakeSocket:
        """The most recently opened socket."""
        return self.sockets[-1]

    async def __call__(self, url: str) -> FakeSocket:
        self.urls.append(url)
        if self.hold is not None:
            await self.hold.wait()
        if self.error is not None:
            raise self.error
        socket = FakeSocket(url)
        self.sockets.append(socket)
        return socket
