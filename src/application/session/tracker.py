"""Tracks the backend-assigned session and conversation identifiers."""

import logging

from domain.models import ConversationIdentity

log = logging.getLogger(__name__)


class SessionTracker:
    """Holds the current ConversationIdentity.

    The identity survives disconnect/connect cycles so a reconnect resumes
    the same backend session; only ``clear()`` forgets it.
    """

    def __init__(self) -> None:
        self._identity = ConversationIdentity()

    @property
    def identity(self) -> ConversationIdentity:
        return self._identity

    @property
    def session_id(self) -> str | None:
        return self._identity.session_id

    @property
    def conversation_id(self) -> str | None:
        return self._identity.conversation_id

    def update(self, session_id: str | None, conversation_id: str | None) -> None:
        """Record the identifiers announced by ``session_started``, verbatim."""
        self._identity = ConversationIdentity(session_id=session_id, conversation_id=conversation_id)
        log.debug(f"Session identity updated: session={session_id}, conversation={conversation_id}")

    def clear(self) -> None:
        """Forget both identifiers so the next connection is anonymous."""
        self._identity = ConversationIdentity()
        log.debug("Session identity cleared")
