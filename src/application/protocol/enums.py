"""
Chat Streaming Protocol - Enums and Constants

Event names of the canonical inbound protocol and the outbound envelope.
"""

from typing import Literal

# =============================================================================
# CORE ENUMS
# =============================================================================

ChatRole = Literal["user", "assistant"]
AnswerKind = Literal["answer", "guardrail_input", "guardrail_oos"]


class EventTypes:
    """All canonical event type constants."""

    # Server-typed events (passed through by the normalizer)
    SESSION_STARTED = "session_started"
    CHAT_HISTORY = "chat_history"
    STREAM_START = "stream_start"
    TOKEN = "token"
    STREAM_END = "stream_end"
    CONVERSATION_TITLE_UPDATED = "conversation_title_updated"
    ERROR = "error"

    # Client-originated events
    WS_CLOSED = "ws_closed"
    UNRECOGNIZED = "unrecognized"

    # Outbound
    CHAT = "chat"


# Event types a server may send with an explicit "type" field
SERVER_EVENT_TYPES: frozenset[str] = frozenset(
    {
        EventTypes.SESSION_STARTED,
        EventTypes.CHAT_HISTORY,
        EventTypes.STREAM_START,
        EventTypes.TOKEN,
        EventTypes.STREAM_END,
        EventTypes.CONVERSATION_TITLE_UPDATED,
        EventTypes.ERROR,
    }
)

# Untyped JSON frames carry their chunk in the first non-null of these fields
CHUNK_FIELDS: tuple[str, ...] = ("content", "token", "text", "delta")

# Untyped JSON frames with any of these set to true close the stream
STREAM_END_FLAGS: tuple[str, ...] = ("done", "finished")

TRANSPORT_ERROR_TEXT = "WebSocket connection error"
