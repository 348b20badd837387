"""
Chat Streaming Protocol - Canonical Events

Every inbound frame is normalized into exactly one of these models. Typed
server events keep unknown fields (``extra="allow"``) so payloads pass
through verbatim. Known fields are coerced leniently: a malformed value
falls back to its default instead of rejecting the whole event.
"""

import json
from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, BeforeValidator, Field

from .enums import AnswerKind, ChatRole, EventTypes

_ANSWER_KINDS = frozenset(get_args(AnswerKind))
_SOURCE_NAME_KEYS = ("name", "title", "source", "url", "id")


# =============================================================================
# LENIENT COERCION
# =============================================================================


def _as_text(value: Any) -> str | None:
    """Scalars become strings; objects, arrays and null become None."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def _as_text_or_empty(value: Any) -> str:
    text = _as_text(value)
    return "" if text is None else text


def _as_chunk(value: Any) -> str:
    """Streamed text is appended verbatim; non-text chunks are serialized."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def _as_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    if isinstance(value, (int, float)):
        return bool(value)
    return False


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return 0.0
    return 0.0


def _as_source(value: Any) -> str | None:
    """A source is a document name; objects contribute their name-like field."""
    if isinstance(value, dict):
        for key in _SOURCE_NAME_KEYS:
            name = _as_text(value.get(key))
            if name:
                return name
        return json.dumps(value, sort_keys=True, default=str)
    return _as_text(value)


def _as_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [text for text in (_as_source(item) for item in value) if text]


def _as_object_list(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _as_kind(value: Any) -> str | None:
    return value if isinstance(value, str) and value in _ANSWER_KINDS else None


def _as_role(value: Any) -> str:
    """Replayed roles other than ``user`` are shown as assistant turns."""
    if isinstance(value, str) and value.strip().lower() == "user":
        return "user"
    return "assistant"


OptionalText = Annotated[str | None, BeforeValidator(_as_text)]
Text = Annotated[str, BeforeValidator(_as_text_or_empty)]
Flag = Annotated[bool, BeforeValidator(_as_flag)]
StringList = Annotated[list[str], BeforeValidator(_as_string_list)]
Kind = Annotated[AnswerKind | None, BeforeValidator(_as_kind)]
Role = Annotated[ChatRole, BeforeValidator(_as_role)]


# =============================================================================
# SHARED PAYLOAD MODELS
# =============================================================================


class CitationPayload(BaseModel):
    """A cited source document attached to a finished answer."""

    title: Text = ""
    year: Text = ""
    type: Text = ""
    confidence: Annotated[float, BeforeValidator(_as_number)] = 0.0
    page: Text = ""

    model_config = {"extra": "allow"}


class HistoryEntry(BaseModel):
    """One replayed message of a resumed conversation."""

    role: Role = "assistant"
    content: Text = ""
    sources: StringList = Field(default_factory=list)

    model_config = {"extra": "allow"}


class _ServerEvent(BaseModel):
    model_config = {"extra": "allow"}


# =============================================================================
# SERVER EVENTS
# =============================================================================


class SessionStartedEvent(_ServerEvent):
    """The backend assigned (or confirmed) the session identifiers."""

    type: Literal["session_started"] = "session_started"
    session_id: OptionalText = None
    conversation_id: OptionalText = None
    new_conversation: Flag = False


class ChatHistoryEvent(_ServerEvent):
    """Replay of a persisted conversation, oldest first."""

    type: Literal["chat_history"] = "chat_history"
    messages: Annotated[list[HistoryEntry], BeforeValidator(_as_object_list)] = Field(default_factory=list)


class StreamStartEvent(_ServerEvent):
    """An assistant answer is about to stream."""

    type: Literal["stream_start"] = "stream_start"
    sources: StringList = Field(default_factory=list)
    kind: Kind = None


class TokenEvent(_ServerEvent):
    """One chunk of the streamed answer."""

    type: Literal["token"] = "token"
    content: Annotated[str, BeforeValidator(_as_chunk)] = ""


class StreamEndEvent(_ServerEvent):
    """The streamed answer is complete."""

    type: Literal["stream_end"] = "stream_end"
    sources: StringList = Field(default_factory=list)
    kind: Kind = None
    citations: Annotated[list[CitationPayload], BeforeValidator(_as_object_list)] = Field(default_factory=list)
    follow_ups: StringList = Field(default_factory=list)


class ConversationTitleUpdatedEvent(_ServerEvent):
    """The backend renamed the conversation."""

    type: Literal["conversation_title_updated"] = "conversation_title_updated"
    conversation_id: OptionalText = None
    title: OptionalText = None


class ErrorEvent(_ServerEvent):
    """A server-side or transport failure."""

    type: Literal["error"] = "error"
    content: OptionalText = None
    message: OptionalText = None

    @property
    def text(self) -> str | None:
        """The human-readable error text, if the event carried one."""
        return self.content or self.message


# =============================================================================
# CLIENT EVENTS
# =============================================================================


class WsClosedEvent(BaseModel):
    """The socket closed, by either side."""

    type: Literal["ws_closed"] = "ws_closed"
    code: int | None = None
    reason: str | None = None


class UnrecognizedEvent(BaseModel):
    """A JSON object matching no known shape. Consumers ignore it."""

    type: Literal["unrecognized"] = "unrecognized"
    payload: dict[str, Any] = Field(default_factory=dict)


ServerEvent = Annotated[
    Union[
        SessionStartedEvent,
        ChatHistoryEvent,
        StreamStartEvent,
        TokenEvent,
        StreamEndEvent,
        ConversationTitleUpdatedEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]

ChatEvent = Union[
    SessionStartedEvent,
    ChatHistoryEvent,
    StreamStartEvent,
    TokenEvent,
    StreamEndEvent,
    ConversationTitleUpdatedEvent,
    ErrorEvent,
    WsClosedEvent,
    UnrecognizedEvent,
]

# Server event model for each typed ``type`` value
SERVER_EVENT_MODELS: dict[str, type[_ServerEvent]] = {
    EventTypes.SESSION_STARTED: SessionStartedEvent,
    EventTypes.CHAT_HISTORY: ChatHistoryEvent,
    EventTypes.STREAM_START: StreamStartEvent,
    EventTypes.TOKEN: TokenEvent,
    EventTypes.STREAM_END: StreamEndEvent,
    EventTypes.CONVERSATION_TITLE_UPDATED: ConversationTitleUpdatedEvent,
    EventTypes.ERROR: ErrorEvent,
}
