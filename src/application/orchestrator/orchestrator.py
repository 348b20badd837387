"""Conversation Orchestrator.

Consumes canonical events from the ConnectionManager and drives the session
tracker, the stream assembler and the observable transcript. Events are
applied strictly in arrival order; each is fully processed before the next.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from application.orchestrator.chat_state import ChatState
from application.orchestrator.context import ConversationContext
from application.orchestrator.scheduled_task import OneShotTask
from application.protocol import (
    ChatEvent,
    ChatHistoryEvent,
    CitationPayload,
    ConversationTitleUpdatedEvent,
    ErrorEvent,
    EventTypes,
    SessionStartedEvent,
    StreamEndEvent,
    StreamStartEvent,
    TokenEvent,
    WsClosedEvent,
    create_chat_message,
)
from application.websocket import ConnectionState
from domain.models import Banner, Citation, Message, MessageKind, MessageRole
from observability import messages_rejected, messages_sent, streams_completed, tokens_received

log = logging.getLogger(__name__)

DEFAULT_ERROR_TEXT = "Something went wrong. Please try again."
GUARDRAIL_INPUT_TEXT = "Off-topic query blocked - I only search internal sales knowledge."
STALLED_STREAM_TEXT = "The response stalled. Please try again."


class ConversationOrchestrator:
    """Drives one conversation session.

    Responsibilities:
    - Dispatch inbound events to their state mutations
    - Accept or reject outbound user turns (at most one outstanding)
    - Start new conversations and deferred suggested-query sends
    - Surface failures as banners, always returning to an idle state
    """

    def __init__(self, context: ConversationContext) -> None:
        """Initialize the orchestrator.

        Args:
            context: The collaborators of this conversation session
        """
        self._context = context
        self._settings = context.settings
        self._session_tracker = context.session_tracker
        self._connection_manager = context.connection_manager
        self._state = context.state
        self._assembler = context.assembler

        self._handlers: dict[str, Callable[[Any], Awaitable[None]]] = {
            EventTypes.SESSION_STARTED: self._on_session_started,
            EventTypes.CHAT_HISTORY: self._on_chat_history,
            EventTypes.STREAM_START: self._on_stream_start,
            EventTypes.TOKEN: self._on_token,
            EventTypes.STREAM_END: self._on_stream_end,
            EventTypes.CONVERSATION_TITLE_UPDATED: self._on_conversation_title_updated,
            EventTypes.ERROR: self._on_error,
            EventTypes.WS_CLOSED: self._on_ws_closed,
        }

        self._deferred_send: OneShotTask | None = None
        self._held_query: str | None = None
        # Set while the answer to a turn abandoned by start_conversation() is still arriving
        self._draining = False
        self._watchdog: OneShotTask | None = None
        self._background_tasks: set[asyncio.Task] = set()
        self._started = False

    @property
    def context(self) -> ConversationContext:
        return self._context

    @property
    def state(self) -> ChatState:
        """The observable state read by the presentation layer."""
        return self._state

    @property
    def is_streaming(self) -> bool:
        return self._assembler.is_active

    @property
    def has_pending_send(self) -> bool:
        """True while a suggested query is scheduled or held back."""
        if self._held_query is not None:
            return True
        return self._deferred_send is not None and self._deferred_send.pending

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Subscribe to the connection and open the socket."""
        if self._started:
            return
        self._started = True
        self._connection_manager.add_event_listener(self.handle_event)
        self._connection_manager.add_state_listener(self._on_connection_state)
        self._connection_manager.connect()
        log.info("🎭 Conversation session started")

    async def close(self) -> None:
        """Cancel scheduled work, unsubscribe and disconnect."""
        self._cancel_deferred_send()
        self._stop_draining()
        self._cancel_watchdog()
        for task in list(self._background_tasks):
            task.cancel()
        self._state.typing.set(False)
        self._assembler.finalize([])
        self._connection_manager.remove_event_listener(self.handle_event)
        self._connection_manager.remove_state_listener(self._on_connection_state)
        self._started = False
        await self._connection_manager.disconnect()
        self._state.connection_state.set(self._connection_manager.state)
        log.info("Conversation session closed")

    # =========================================================================
    # Inbound
    # =========================================================================

    async def handle_event(self, event: ChatEvent) -> None:
        """Apply one canonical event. Unknown and unrecognized types are ignored."""
        handler = self._handlers.get(event.type)
        if handler is None:
            log.debug(f"Ignoring event type: {event.type}")
            return
        log.debug(f"Dispatching event: {event.type}")
        await handler(event)

    async def _on_session_started(self, event: SessionStartedEvent) -> None:
        self._session_tracker.update(event.session_id, event.conversation_id)
        self._state.active_conversation_id.set(event.conversation_id)
        if not event.new_conversation:
            self._refresh_conversations()

    async def _on_chat_history(self, event: ChatHistoryEvent) -> None:
        history = [Message.create_history_message(MessageRole(entry.role), entry.content, entry.sources) for entry in event.messages]
        self._state.append_messages(history)
        log.debug(f"Replayed {len(history)} history message(s)")

    async def _on_stream_start(self, event: StreamStartEvent) -> None:
        if self._draining:
            self._arm_watchdog()
            return
        self._state.typing.set(False)
        kind = MessageKind(event.kind) if event.kind else None
        already_active = self._assembler.is_active
        self._assembler.ensure_bubble(event.sources, kind)
        if not already_active and kind == MessageKind.GUARDRAIL_INPUT:
            self._state.banner.set(Banner(GUARDRAIL_INPUT_TEXT, "warning"))
        self._arm_watchdog()

    async def _on_token(self, event: TokenEvent) -> None:
        if self._draining:
            log.debug(f"Discarding chunk of an abandoned answer ({len(event.content)} chars)")
            self._arm_watchdog()
            return
        if not self._assembler.is_active:
            self._state.typing.set(False)
            self._assembler.ensure_bubble([])
        self._assembler.append_chunk(event.content)
        tokens_received.add(1)
        self._arm_watchdog()

    async def _on_stream_end(self, event: StreamEndEvent) -> None:
        kind = MessageKind(event.kind) if event.kind else None
        previous_kind = self._assembler.active.kind if self._assembler.active else None
        message = self._assembler.finalize(
            event.sources,
            citations=[_to_citation(c) for c in event.citations],
            follow_ups=event.follow_ups,
            kind=kind,
        )
        self._state.typing.set(False)
        self._cancel_watchdog()
        if message is not None:
            streams_completed.add(1)
            if kind == MessageKind.GUARDRAIL_INPUT and previous_kind != MessageKind.GUARDRAIL_INPUT:
                self._state.banner.set(Banner(GUARDRAIL_INPUT_TEXT, "warning"))
        self._refresh_conversations()
        self._finish_draining()

    async def _on_conversation_title_updated(self, event: ConversationTitleUpdatedEvent) -> None:
        self._refresh_conversations()

    async def _on_error(self, event: ErrorEvent) -> None:
        self._state.typing.set(False)
        self._assembler.finalize([])
        self._cancel_watchdog()
        text = event.text or DEFAULT_ERROR_TEXT
        log.warning(f"Error event surfaced: {text}")
        self._state.banner.set(Banner(text, "error"))
        self._finish_draining()

    async def _on_ws_closed(self, event: WsClosedEvent) -> None:
        self._state.typing.set(False)
        self._assembler.finalize([])
        self._cancel_watchdog()
        self._finish_draining()

    def _on_connection_state(self, old_state: ConnectionState, new_state: ConnectionState) -> None:
        self._state.connection_state.set(new_state)

    # =========================================================================
    # Outbound
    # =========================================================================

    async def send_message(self, text: str) -> bool:
        """Send a user turn.

        Rejected when the text is blank or a previous turn is still
        outstanding (typing indicator set, a stream active, or an
        abandoned answer still arriving).

        Args:
            text: Free-text user input

        Returns:
            True if the turn was accepted
        """
        trimmed = text.strip()
        if not trimmed:
            messages_rejected.add(1)
            log.debug("Rejected blank message")
            return False
        if self._turn_in_flight():
            messages_rejected.add(1)
            log.warning("Rejected message: a turn is already in flight")
            return False

        self._state.banner.set(None)
        self._state.append_message(Message.create_user_message(trimmed))
        self._state.typing.set(True)
        messages_sent.add(1)
        self._arm_watchdog()

        await self._connection_manager.send(create_chat_message(trimmed))
        return True

    def start_conversation(self, query: str | None = None) -> None:
        """Begin a fresh transcript, optionally auto-sending a suggested query.

        The query is sent after ``auto_send_delay_seconds`` on a cancellable
        one-shot task. A turn still in flight is abandoned: its partial
        answer is frozen in the discarded transcript, the rest of it is
        dropped as it arrives, and the query is held back until it ends.

        Args:
            query: Suggested query to send once the chat view is shown
        """
        self._cancel_deferred_send()
        self._held_query = None
        if self._turn_in_flight() and not self._draining:
            log.info("Abandoning the answer in flight")
            self._draining = True
        self._assembler.finalize([])
        self._state.start_transcript()
        if query:
            self._schedule_suggested_query(query, self._settings.auto_send_delay_seconds)

    async def new_conversation(self) -> None:
        """Abandon the current conversation and open an anonymous session."""
        self._cancel_deferred_send()
        self._stop_draining()
        self._cancel_watchdog()
        self._assembler.finalize([])
        self._state.active_conversation_id.set(None)
        self._state.start_transcript()
        await self._connection_manager.reset()
        self._connection_manager.connect()
        log.info("Started a new conversation")

    def set_active_conversation(self, conversation_id: str | None) -> None:
        self._state.active_conversation_id.set(conversation_id)

    def clear_banner(self) -> None:
        self._state.banner.set(None)

    # =========================================================================
    # Internals
    # =========================================================================

    def _turn_in_flight(self) -> bool:
        return self._state.typing.value or self._assembler.is_active or self._draining

    def _schedule_suggested_query(self, query: str, delay_seconds: float) -> None:
        async def send_suggested_query() -> None:
            if self._draining:
                log.debug("Holding the suggested query until the abandoned answer ends")
                self._held_query = query
                return
            await self.send_message(query)

        self._deferred_send = OneShotTask(delay_seconds, send_suggested_query, name="deferred-send").start()

    def _finish_draining(self) -> None:
        """The abandoned answer ended; release a held suggested query."""
        if not self._draining:
            return
        self._draining = False
        query, self._held_query = self._held_query, None
        log.debug("Abandoned answer ended")
        if query:
            self._schedule_suggested_query(query, 0)

    def _stop_draining(self) -> None:
        self._draining = False
        self._held_query = None

    def _refresh_conversations(self) -> None:
        """Fire the external conversation-list refresh; failures are logged only."""
        hook = self._context.refresh_conversations
        if hook is None:
            return
        try:
            result = hook()
        except Exception as e:
            log.error(f"Conversation list refresh failed: {e}")
            return
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._background_tasks.add(task)
            task.add_done_callback(self._on_background_task_done)

    def _on_background_task_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error(f"Conversation list refresh failed: {error}")

    def _cancel_deferred_send(self) -> None:
        if self._deferred_send is not None:
            self._deferred_send.cancel()
            self._deferred_send = None

    def _arm_watchdog(self) -> None:
        timeout = self._settings.stream_stall_timeout_seconds
        if not timeout:
            return
        self._cancel_watchdog()
        self._watchdog = OneShotTask(timeout, self._on_stream_stalled, name="stream-watchdog").start()

    def _cancel_watchdog(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    async def _on_stream_stalled(self) -> None:
        self._watchdog = None
        if self._draining:
            log.warning(f"Abandoned answer silent for {self._settings.stream_stall_timeout_seconds}s, no longer waiting for it")
            self._finish_draining()
            return
        if not (self._state.typing.value or self._assembler.is_active):
            return
        log.warning(f"No frames for {self._settings.stream_stall_timeout_seconds}s, abandoning the turn")
        self._state.typing.set(False)
        self._assembler.finalize([])
        self._state.banner.set(Banner(STALLED_STREAM_TEXT, "warning"))


def _to_citation(payload: CitationPayload) -> Citation:
    return Citation(
        title=payload.title,
        year=payload.year,
        type=payload.type,
        confidence=payload.confidence,
        page=payload.page,
    )
