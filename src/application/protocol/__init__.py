"""
Chat Streaming Protocol - Python Pydantic Models

Package Structure:
    - enums.py: Event type constants, chunk field precedence, literals
    - events.py: Canonical inbound event union (tagged by ``type``)
    - core.py: Outbound chat envelope
    - normalizer.py: Raw frame -> canonical event

Usage:
    from application.protocol import normalize, TokenEvent, create_chat_message
"""

from .core import ChatRequest, create_chat_message
from .enums import CHUNK_FIELDS, SERVER_EVENT_TYPES, TRANSPORT_ERROR_TEXT, AnswerKind, ChatRole, EventTypes
from .events import (
    SERVER_EVENT_MODELS,
    ChatEvent,
    ChatHistoryEvent,
    CitationPayload,
    ConversationTitleUpdatedEvent,
    ErrorEvent,
    HistoryEntry,
    SessionStartedEvent,
    StreamEndEvent,
    StreamStartEvent,
    TokenEvent,
    UnrecognizedEvent,
    WsClosedEvent,
)
from .normalizer import normalize

__all__ = [
    # Enums & constants
    "AnswerKind",
    "ChatRole",
    "CHUNK_FIELDS",
    "EventTypes",
    "SERVER_EVENT_TYPES",
    "TRANSPORT_ERROR_TEXT",
    # Events
    "SERVER_EVENT_MODELS",
    "ChatEvent",
    "ChatHistoryEvent",
    "CitationPayload",
    "ConversationTitleUpdatedEvent",
    "ErrorEvent",
    "HistoryEntry",
    "SessionStartedEvent",
    "StreamEndEvent",
    "StreamStartEvent",
    "TokenEvent",
    "UnrecognizedEvent",
    "WsClosedEvent",
    # Outbound
    "ChatRequest",
    "create_chat_message",
    # Normalization
    "normalize",
]
