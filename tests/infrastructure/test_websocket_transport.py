"""Tests for the websockets transport adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, InvalidURI
from websockets.frames import Close

from domain.exceptions import NotConnectedError, TransportError
from infrastructure.adapters import WebsocketsConnection, WebsocketsConnector
from tests.fixtures.factories import SettingsFactory

CONNECT = "infrastructure.adapters.websocket_transport.connect"


class _AsyncFrames:
    """Async iterator over canned frames, optionally ending with an exception."""

    def __init__(self, frames: list, error: Exception | None = None) -> None:
        self._frames = list(frames)
        self._error = error

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._frames:
            return self._frames.pop(0)
        if self._error is not None:
            raise self._error
        raise StopAsyncIteration


def _mock_websocket(frames: list | None = None, error: Exception | None = None) -> MagicMock:
    websocket = MagicMock()
    websocket.__aiter__ = MagicMock(return_value=_AsyncFrames(frames or [], error))
    websocket.send = AsyncMock()
    websocket.close = AsyncMock()
    websocket.close_code = 1000
    websocket.close_reason = "bye"
    return websocket


class TestWebsocketsConnector:
    """Test opening sockets."""

    def test_from_settings(self) -> None:
        connector = WebsocketsConnector.from_settings(SettingsFactory.create(ws_open_timeout_seconds=3.0, ws_ping_interval_seconds=None, ws_max_frame_bytes=4096))

        assert connector._open_timeout == 3.0
        assert connector._ping_interval is None
        assert connector._max_size == 4096

    @pytest.mark.asyncio
    async def test_connect_wraps_connection(self) -> None:
        websocket = _mock_websocket()
        with patch(CONNECT, new=AsyncMock(return_value=websocket)) as connect:
            connection = await WebsocketsConnector(open_timeout=5.0)("ws://host/ws")

        connect.assert_awaited_once_with("ws://host/ws", open_timeout=5.0, ping_interval=20.0, max_size=1 << 20)
        assert isinstance(connection, WebsocketsConnection)
        assert connection.close_code == 1000
        assert connection.close_reason == "bye"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            OSError("connection refused"),
            TimeoutError(),
            InvalidURI("nope://", "scheme isn't ws or wss"),
        ],
    )
    async def test_open_failures_become_transport_errors(self, error: Exception) -> None:
        with patch(CONNECT, new=AsyncMock(side_effect=error)):
            with pytest.raises(TransportError) as exc_info:
                await WebsocketsConnector()("ws://host/ws")

        assert exc_info.value.url == "ws://host/ws"
        assert exc_info.value.__cause__ is error


class TestWebsocketsConnection:
    """Test the wrapped socket."""

    @pytest.mark.asyncio
    async def test_frames_yields_until_close(self) -> None:
        connection = WebsocketsConnection(_mock_websocket(["a", b"b"]), "ws://host/ws")

        received = [frame async for frame in connection.frames()]

        assert received == ["a", b"b"]

    @pytest.mark.asyncio
    async def test_abnormal_close_raises_transport_error(self) -> None:
        error = ConnectionClosedError(Close(1011, "internal error"), None)
        connection = WebsocketsConnection(_mock_websocket(["a"], error), "ws://host/ws")

        received = []
        with pytest.raises(TransportError):
            async for frame in connection.frames():
                received.append(frame)

        assert received == ["a"]

    @pytest.mark.asyncio
    async def test_send_on_closed_socket(self) -> None:
        websocket = _mock_websocket()
        websocket.send.side_effect = ConnectionClosed(None, None)
        connection = WebsocketsConnection(websocket, "ws://host/ws")

        with pytest.raises(NotConnectedError):
            await connection.send("frame")

    @pytest.mark.asyncio
    async def test_send_and_close_delegate(self) -> None:
        websocket = _mock_websocket()
        connection = WebsocketsConnection(websocket, "ws://host/ws")

        await connection.send("frame")
        await connection.close()

        websocket.send.assert_awaited_once_with("frame")
        websocket.close.assert_awaited_once()
