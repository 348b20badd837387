"""Test data factories.

Raw wire frames as the backend sends them, plus client-side settings
tuned for fast tests.
"""

import json
from typing import Any

from application.settings import Settings

WS_URL = "ws://copilot.test/ws"


# ============================================================================
# SETTINGS FACTORY
# ============================================================================


class SettingsFactory:
    """Factory for Settings with test-friendly timings."""

    @staticmethod
    def create(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "ws_url": WS_URL,
            "auto_send_delay_seconds": 0.01,
            "stream_stall_timeout_seconds": None,
        }
        values.update(overrides)
        return Settings(**values)


# ============================================================================
# FRAME FACTORY
# ============================================================================


class FrameFactory:
    """Factory for raw inbound frames."""

    @staticmethod
    def typed(event_type: str, **fields: Any) -> str:
        return json.dumps({"type": event_type, **fields})

    @staticmethod
    def session_started(session_id: str = "s-1", conversation_id: str = "c-1", new_conversation: bool = False) -> str:
        return FrameFactory.typed(
            "session_started",
            session_id=session_id,
            conversation_id=conversation_id,
            new_conversation=new_conversation,
        )

    @staticmethod
    def stream_start(sources: list[str] | None = None, kind: str | None = None) -> str:
        fields: dict[str, Any] = {"sources": sources or []}
        if kind:
            fields["kind"] = kind
        return FrameFactory.typed("stream_start", **fields)

    @staticmethod
    def token(content: str) -> str:
        return FrameFactory.typed("token", content=content)

    @staticmethod
    def stream_end(sources: list[str] | None = None, **fields: Any) -> str:
        return FrameFactory.typed("stream_end", sources=sources or [], **fields)

    @staticmethod
    def error(content: str | None = None) -> str:
        return FrameFactory.typed("error", content=content)

    @staticmethod
    def chunk(**fields: Any) -> str:
        """An untyped JSON chunk."""
        return json.dumps(fields)
