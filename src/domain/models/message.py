"""Message model representing a single bubble in the conversation transcript."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class MessageRole(str, Enum):
    """Role of the message sender."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageKind(str, Enum):
    """Classification of an answer.

    Guardrail kinds mark answers the server refused to ground in the corpus.
    """

    ANSWER = "answer"
    GUARDRAIL_INPUT = "guardrail_input"
    GUARDRAIL_OOS = "guardrail_oos"


@dataclass(frozen=True)
class Citation:
    """A reference to a source document backing an answer."""

    title: str
    year: str = ""
    type: str = ""
    confidence: float = 0.0
    page: str = ""


@dataclass
class Message:
    """
    Represents a single message in the conversation transcript.

    The text of an assistant message is mutable while ``streaming`` is True
    and is frozen once the stream is finalized.
    """

    id: str
    role: MessageRole
    text: str
    kind: MessageKind = MessageKind.ANSWER
    citations: list[Citation] = field(default_factory=list)
    follow_ups: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    streaming: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create_user_message(cls, text: str) -> "Message":
        """Create a new user message."""
        return cls(
            id=str(uuid.uuid4()),
            role=MessageRole.USER,
            text=text,
        )

    @classmethod
    def create_assistant_message(
        cls,
        text: str = "",
        sources: list[str] | None = None,
        streaming: bool = False,
        kind: MessageKind = MessageKind.ANSWER,
    ) -> "Message":
        """Create a new assistant message."""
        return cls(
            id=str(uuid.uuid4()),
            role=MessageRole.ASSISTANT,
            text=text,
            kind=kind,
            sources=list(sources or []),
            streaming=streaming,
        )

    @classmethod
    def create_history_message(cls, role: MessageRole, text: str, sources: list[str] | None = None) -> "Message":
        """Create a finalized message replayed from the server-side history."""
        return cls(
            id=str(uuid.uuid4()),
            role=role,
            text=text,
            sources=list(sources or []),
        )
