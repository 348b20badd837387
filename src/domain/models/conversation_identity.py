"""Backend-assigned identifiers for the current chat session."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConversationIdentity:
    """Session and conversation identifiers assigned by the backend.

    Both are absent until the first ``session_started`` event arrives.

    Attributes:
        session_id: Transport session enabling multi-turn memory
        conversation_id: Persisted thread of messages
    """

    session_id: str | None = None
    conversation_id: str | None = None

    @property
    def is_anonymous(self) -> bool:
        """True when the backend has not assigned any identifier yet."""
        return self.session_id is None and self.conversation_id is None

    def to_query_params(self) -> dict[str, str]:
        """Connection parameters announcing this identity on reconnect."""
        params: dict[str, str] = {}
        if self.session_id:
            params["session_id"] = self.session_id
        if self.conversation_id:
            params["conversation_id"] = self.conversation_id
        return params
