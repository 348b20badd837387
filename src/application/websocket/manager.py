"""WebSocket Connection Manager.

Owns the single client socket of a conversation session, providing:
- Connection lifecycle (connect, disconnect, reset), always caller-initiated
- An outbound pending queue, flushed in order once the socket opens
- Normalization of inbound frames and fan-out to event listeners
- State transition notifications

There is no automatic reconnect: a dropped socket surfaces as ``error`` /
``ws_closed`` events and stays down until the next ``connect()`` or ``send()``.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Protocol
from urllib.parse import urlencode

from application.protocol import TRANSPORT_ERROR_TEXT, ChatEvent, ErrorEvent, UnrecognizedEvent, WsClosedEvent, normalize
from application.session import SessionTracker
from application.websocket.state import ConnectionState, ConnectionStateMachine
from observability import connection_errors, connections_opened, frames_received, frames_unrecognized

log = logging.getLogger(__name__)


class SocketConnection(Protocol):
    """An open client socket."""

    @property
    def close_code(self) -> int | None: ...

    @property
    def close_reason(self) -> str | None: ...

    async def send(self, frame: str) -> None: ...

    def frames(self) -> AsyncIterator[str | bytes]: ...

    async def close(self) -> None: ...


SocketConnector = Callable[[str], Awaitable[SocketConnection]]
EventListener = Callable[[ChatEvent], Awaitable[None]]
StateListener = Callable[[ConnectionState, ConnectionState], None]


class ConnectionManager:
    """Manages the client WebSocket for one conversation session.

    Handles:
    - Idempotent, non-blocking connect (the socket opens on a background task)
    - Immediate send when open, queue-and-connect otherwise
    - Disconnect dropping unsent frames, reset forgetting the session identity
    - Converting transport failures into canonical events
    """

    def __init__(self, url: str, session_tracker: SessionTracker, connector: SocketConnector):
        """Initialize the ConnectionManager.

        Args:
            url: The fixed backend endpoint (without identity parameters)
            session_tracker: Source of session/conversation ids for reconnects
            connector: Coroutine function opening a socket for a URL
        """
        self._url = url
        self._session_tracker = session_tracker
        self._connector = connector

        self._state_machine = ConnectionStateMachine()
        self._socket: SocketConnection | None = None
        self._reader_task: asyncio.Task | None = None

        # Outbound frames awaiting an open socket (FIFO)
        self._pending: list[str] = []
        self._flushing = False

        self._event_listeners: list[EventListener] = []
        self._state_listeners: list[StateListener] = []

    # =========================================================================
    # Query Methods
    # =========================================================================

    @property
    def state(self) -> ConnectionState:
        """Get the current connection state."""
        return self._state_machine.state

    @property
    def state_machine(self) -> ConnectionStateMachine:
        return self._state_machine

    @property
    def is_connected(self) -> bool:
        return self._state_machine.can_send_messages

    @property
    def pending_messages(self) -> list[str]:
        """Frames queued for the next open socket, oldest first."""
        return self._pending.copy()

    def build_url(self) -> str:
        """Compose the endpoint URL with the known identity parameters."""
        params = self._session_tracker.identity.to_query_params()
        if not params:
            return self._url
        separator = "&" if "?" in self._url else "?"
        return f"{self._url}{separator}{urlencode(params)}"

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_event_listener(self, listener: EventListener) -> None:
        """Register an async callback receiving every canonical event, in order.

        Args:
            listener: Async function awaited once per event
        """
        self._event_listeners.append(listener)

    def remove_event_listener(self, listener: EventListener) -> None:
        if listener in self._event_listeners:
            self._event_listeners.remove(listener)

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with (old_state, new_state) on each transition.

        Args:
            listener: Function called synchronously after the transition
        """
        self._state_listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        if listener in self._state_listeners:
            self._state_listeners.remove(listener)

    # =========================================================================
    # Connection Lifecycle
    # =========================================================================

    def connect(self) -> None:
        """Open the socket unless one is already opening or open.

        Returns immediately; the OPEN transition and the pending queue flush
        happen later on the reader task. Must be called from a running loop.
        """
        if self._state_machine.is_busy:
            log.debug(f"connect() ignored, socket already {self.state.value}")
            return

        loop = asyncio.get_running_loop()
        url = self.build_url()
        if not self._transition(ConnectionState.CONNECTING, "connect requested"):
            return
        log.info(f"Connecting to {url}")
        self._reader_task = loop.create_task(self._run(url), name="chat-socket-reader")

    async def send(self, frame: str) -> None:
        """Transmit a frame now if open, otherwise queue it and connect.

        Args:
            frame: The serialized outbound payload
        """
        if self._state_machine.can_send_messages and self._socket is not None and not self._flushing:
            await self._transmit(self._socket, frame)
            return

        self._pending.append(frame)
        log.debug(f"Socket {self.state.value}, queued frame ({len(self._pending)} pending)")
        self.connect()

    async def disconnect(self) -> None:
        """Close the socket and drop every frame not yet sent."""
        if self._pending:
            log.info(f"Dropping {len(self._pending)} unsent frame(s) on disconnect")
        self._pending.clear()

        if self.state == ConnectionState.DISCONNECTED:
            return

        socket, self._socket = self._socket, None
        task, self._reader_task = self._reader_task, None

        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if socket is not None:
            try:
                await socket.close()
            except Exception as e:
                log.debug(f"Error during graceful close: {e}")

        await self._handle_closed(code=None, reason="client disconnect")

    async def reset(self) -> None:
        """Disconnect and forget the session identity.

        The next ``connect()`` opens an anonymous session.
        """
        await self.disconnect()
        self._session_tracker.clear()

    # =========================================================================
    # Internals
    # =========================================================================

    async def _run(self, url: str) -> None:
        """Open the socket, flush the queue, then pump inbound frames."""
        try:
            socket = await self._connector(url)
        except Exception as e:
            log.error(f"Failed to open socket to {url}: {e}")
            connection_errors.add(1)
            self._reader_task = None
            await self._emit(ErrorEvent(content=TRANSPORT_ERROR_TEXT))
            await self._handle_closed(code=None, reason=str(e))
            return

        self._socket = socket
        self._transition(ConnectionState.OPEN, "socket opened")
        connections_opened.add(1)
        log.info(f"🔌 Connected to {url}")

        await self._flush_pending(socket)

        try:
            async for frame in socket.frames():
                frames_received.add(1)
                event = normalize(frame)
                if event is None:
                    continue
                if isinstance(event, UnrecognizedEvent):
                    frames_unrecognized.add(1)
                await self._emit(event)
        except Exception as e:
            if self._socket is not socket:
                return
            log.error(f"Socket failure: {e}")
            connection_errors.add(1)
            await self._emit(ErrorEvent(content=TRANSPORT_ERROR_TEXT))

        # A disconnect() issued from a listener already ran the close path
        if self._socket is not socket:
            return
        self._socket = None
        self._reader_task = None
        await self._handle_closed(code=socket.close_code, reason=socket.close_reason)

    async def _flush_pending(self, socket: SocketConnection) -> None:
        """Transmit queued frames in enqueue order; frames queued meanwhile join the tail."""
        if not self._pending:
            return
        log.debug(f"Flushing {len(self._pending)} pending frame(s)")
        self._flushing = True
        try:
            while self._pending and self._socket is socket:
                frame = self._pending.pop(0)
                if not await self._transmit(socket, frame):
                    break
        finally:
            self._flushing = False

    async def _transmit(self, socket: SocketConnection, frame: str) -> bool:
        try:
            await socket.send(frame)
            return True
        except Exception as e:
            log.error(f"Failed to send frame: {e}")
            connection_errors.add(1)
            await self._emit(ErrorEvent(content=TRANSPORT_ERROR_TEXT))
            try:
                await socket.close()
            except Exception as close_error:
                log.debug(f"Error during close after failed send: {close_error}")
            return False

    async def _handle_closed(self, code: int | None, reason: str | None) -> None:
        if self.state == ConnectionState.DISCONNECTED:
            return
        self._transition(ConnectionState.CLOSED, reason)
        self._transition(ConnectionState.DISCONNECTED, reason)
        log.info(f"Socket closed (code={code}, reason={reason or 'n/a'})")
        await self._emit(WsClosedEvent(code=code, reason=reason))

    async def _emit(self, event: ChatEvent) -> None:
        for listener in list(self._event_listeners):
            try:
                await listener(event)
            except Exception as e:
                log.error(f"Error in event listener for '{event.type}': {e}")

    def _transition(self, new_state: ConnectionState, reason: str | None) -> bool:
        old_state = self._state_machine.state
        if not self._state_machine.transition_to(new_state, reason):
            return False
        for listener in list(self._state_listeners):
            try:
                listener(old_state, new_state)
            except Exception as e:
                log.error(f"Error in state listener: {e}")
        return True
