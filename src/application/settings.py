"""Application settings configuration for the chat client."""

import logging
import sys

from neuroglia.hosting.abstractions import ApplicationSettings


class Settings(ApplicationSettings):
    """Chat client settings, overridable via COPILOT_CLIENT_* env vars."""

    # Logging Configuration
    log_level: str = "INFO"

    # Application Configuration
    app_name: str = "Sales Co-Pilot Client"
    app_version: str = "1.0.0"

    # WebSocket Transport
    ws_url: str = "ws://localhost:8000/ws"
    ws_open_timeout_seconds: float = 10.0  # Opening handshake budget
    ws_ping_interval_seconds: float | None = 20.0  # None disables keep-alive pings
    ws_max_frame_bytes: int = 1 << 20

    # Conversation Behaviour
    auto_send_delay_seconds: float = 0.4  # Delay before a suggested query is sent after start_conversation()
    stream_stall_timeout_seconds: float | None = None  # Watchdog for silent streams (None = disabled)

    class Config:
        env_file = ".env"
        env_prefix = "COPILOT_CLIENT_"  # All env vars prefixed with COPILOT_CLIENT_
        case_sensitive = False
        extra = "ignore"


app_settings = Settings()


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party loggers
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
