"""Observability utilities and metrics for the chat client."""

from .metrics import (
    connection_errors,
    connections_opened,
    frames_received,
    frames_unrecognized,
    messages_rejected,
    messages_sent,
    streams_completed,
    tokens_received,
)

__all__ = [
    # Frame metrics
    "frames_received",
    "frames_unrecognized",
    # Stream metrics
    "tokens_received",
    "streams_completed",
    # Message metrics
    "messages_sent",
    "messages_rejected",
    # Connection metrics
    "connections_opened",
    "connection_errors",
]
