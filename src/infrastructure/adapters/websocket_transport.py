"""websockets adapter for the chat transport."""

import logging
from collections.abc import AsyncIterator

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, InvalidHandshake, InvalidURI

from application.settings import Settings
from domain.exceptions import NotConnectedError, TransportError

logger = logging.getLogger(__name__)


class WebsocketsConnection:
    """
    One open socket, wrapped so callers only see domain exceptions.

    Satisfies the ``SocketConnection`` protocol expected by the
    ConnectionManager.
    """

    def __init__(self, websocket: ClientConnection, url: str) -> None:
        self._websocket = websocket
        self._url = url

    @property
    def close_code(self) -> int | None:
        return self._websocket.close_code

    @property
    def close_reason(self) -> str | None:
        return self._websocket.close_reason

    async def send(self, frame: str) -> None:
        """
        Write one text frame.

        Raises:
            NotConnectedError: If the socket already closed
        """
        try:
            await self._websocket.send(frame)
        except ConnectionClosed as e:
            logger.warning(f"Send on closed socket {self._url}: {e}")
            raise NotConnectedError() from e

    async def frames(self) -> AsyncIterator[str | bytes]:
        """
        Yield inbound frames until the socket closes.

        A normal close ends the iteration; an abnormal one raises.

        Raises:
            TransportError: If the connection dropped abnormally
        """
        try:
            async for frame in self._websocket:
                yield frame
        except ConnectionClosedError as e:
            raise TransportError(f"Connection lost: {e}", url=self._url) from e

    async def close(self) -> None:
        """Close the socket (idempotent)."""
        await self._websocket.close()


class WebsocketsConnector:
    """
    Opens client sockets with the websockets library.

    Instances are callables matching ``SocketConnector``.
    """

    def __init__(
        self,
        open_timeout: float = 10.0,
        ping_interval: float | None = 20.0,
        max_size: int = 1 << 20,
    ) -> None:
        """
        Initialize the connector.

        Args:
            open_timeout: Seconds allowed for the opening handshake
            ping_interval: Keep-alive ping interval in seconds (None disables)
            max_size: Maximum inbound frame size in bytes
        """
        self._open_timeout = open_timeout
        self._ping_interval = ping_interval
        self._max_size = max_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "WebsocketsConnector":
        return cls(
            open_timeout=settings.ws_open_timeout_seconds,
            ping_interval=settings.ws_ping_interval_seconds,
            max_size=settings.ws_max_frame_bytes,
        )

    async def __call__(self, url: str) -> WebsocketsConnection:
        """
        Open a socket to ``url``.

        Raises:
            TransportError: If the URL is invalid or the handshake fails
        """
        try:
            websocket = await connect(
                url,
                open_timeout=self._open_timeout,
                ping_interval=self._ping_interval,
                max_size=self._max_size,
            )
        except InvalidURI as e:
            logger.error(f"Invalid WebSocket URI: {e}")
            raise TransportError(f"Invalid backend URL: {url}", url=url) from e
        except InvalidHandshake as e:
            logger.error(f"WebSocket handshake failed: {e}")
            raise TransportError(f"Handshake failed: {e}", url=url) from e
        except TimeoutError as e:
            logger.error(f"WebSocket open timed out after {self._open_timeout}s: {url}")
            raise TransportError("Connection timed out", url=url) from e
        except OSError as e:
            logger.error(f"Network error connecting to {url}: {e}")
            raise TransportError(f"Network error: {e}", url=url) from e

        return WebsocketsConnection(websocket, url)
