"""Assembly of streamed answers.

This module provides the StreamAssembler class which turns a sequence of
token chunks into a single assistant message in the transcript.
"""

import logging

from application.orchestrator.chat_state import ChatState
from domain.models import Citation, Message, MessageKind

log = logging.getLogger(__name__)


class StreamAssembler:
    """Owns the single in-progress assistant message.

    At most one message is active at any time. Chunks are concatenated onto
    it in arrival order; finalizing freezes it and releases the slot.

    Example:
        >>> assembler = StreamAssembler(state)
        >>> assembler.ensure_bubble(sources=["deck.pdf"])
        >>> assembler.append_chunk("Hello")
        >>> assembler.finalize([])
    """

    def __init__(self, state: ChatState) -> None:
        """Initialize the StreamAssembler.

        Args:
            state: The conversation state whose transcript receives the bubble
        """
        self._state = state
        self._active: Message | None = None

    @property
    def active(self) -> Message | None:
        """The message currently accepting chunks, if any."""
        return self._active

    @property
    def is_active(self) -> bool:
        return self._active is not None

    def ensure_bubble(self, sources: list[str], kind: MessageKind | None = None) -> Message:
        """Start a streaming assistant message unless one is already active.

        Args:
            sources: Source documents announced with the stream
            kind: Optional answer classification

        Returns:
            The active message (new or existing)
        """
        if self._active is not None:
            return self._active

        message = Message.create_assistant_message(sources=sources, streaming=True, kind=kind or MessageKind.ANSWER)
        self._active = message
        self._state.append_message(message)
        log.debug(f"Started streaming message {message.id}")
        return message

    def append_chunk(self, text: str) -> bool:
        """Concatenate a chunk onto the active message.

        A chunk arriving with no active stream is dropped.

        Args:
            text: The chunk, in arrival order

        Returns:
            True if the chunk was appended
        """
        if self._active is None:
            log.warning(f"Dropping chunk with no active stream ({len(text)} chars)")
            return False
        if not text:
            return True

        self._active.text += text
        self._state.messages.notify()
        return True

    def finalize(
        self,
        sources: list[str],
        citations: list[Citation] | None = None,
        follow_ups: list[str] | None = None,
        kind: MessageKind | None = None,
    ) -> Message | None:
        """Freeze the active message, keeping whatever text it holds.

        Args:
            sources: Replaces the message sources when non-empty
            citations: Attached when non-empty
            follow_ups: Attached when non-empty
            kind: Overrides the answer classification when given

        Returns:
            The finalized message, or None if no stream was active
        """
        message = self._active
        if message is None:
            return None

        message.streaming = False
        if sources:
            message.sources = list(sources)
        if citations:
            message.citations = list(citations)
        if follow_ups:
            message.follow_ups = list(follow_ups)
        if kind is not None:
            message.kind = kind

        self._active = None
        self._state.messages.notify()
        log.debug(f"Finalized streaming message {message.id} ({len(message.text)} chars)")
        return message
