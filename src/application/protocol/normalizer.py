"""Inbound frame normalization.

Servers speak four shapes: the typed protocol, untyped JSON chunks, plain
text frames, and arbitrary JSON. ``normalize`` folds all of them into the
canonical ``ChatEvent`` union and never raises.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from .enums import CHUNK_FIELDS, SERVER_EVENT_TYPES, STREAM_END_FLAGS
from .events import SERVER_EVENT_MODELS, ChatEvent, StreamEndEvent, TokenEvent, UnrecognizedEvent

log = logging.getLogger(__name__)


def normalize(frame: str | bytes | bytearray) -> ChatEvent | None:
    """Convert one raw frame into a canonical event.

    Rules, in priority order:
    1. JSON object with a known ``type``: passed through as that event,
       malformed fields falling back to their defaults.
    2. JSON object without ``type``: the first non-null of ``content``,
       ``token``, ``text``, ``delta`` becomes a ``token`` event, or a
       ``stream_end`` event when ``done``/``finished`` is true.
    3. Not JSON: the trimmed text becomes a ``token`` event; blank frames
       yield nothing.
    4. Any other JSON object is wrapped as ``unrecognized``.

    Args:
        frame: The raw text or binary frame

    Returns:
        The canonical event, or None when the frame carries nothing
    """
    text = _decode(frame)

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return _raw_text_token(text)

    if not isinstance(data, dict):
        # Bare JSON scalars and arrays are plain text to this protocol
        return _raw_text_token(text)

    event_type = data.get("type")
    if event_type:
        if isinstance(event_type, str) and event_type in SERVER_EVENT_TYPES:
            return _validate_typed(event_type, data)
        return UnrecognizedEvent(payload=data)

    chunk = _extract_chunk(data)
    if chunk is None:
        return UnrecognizedEvent(payload=data)

    if any(data.get(flag) is True for flag in STREAM_END_FLAGS):
        return StreamEndEvent(sources=data.get("sources"))
    return TokenEvent(content=chunk)


def _decode(frame: str | bytes | bytearray) -> str:
    if isinstance(frame, (bytes, bytearray)):
        return bytes(frame).decode("utf-8", errors="replace")
    return frame


def _raw_text_token(text: str) -> TokenEvent | None:
    trimmed = text.strip()
    if not trimmed:
        return None
    return TokenEvent(content=trimmed)


def _extract_chunk(data: dict[str, Any]) -> Any | None:
    for field_name in CHUNK_FIELDS:
        value = data.get(field_name)
        if value is not None:
            return value
    return None


def _validate_typed(event_type: str, data: dict[str, Any]) -> ChatEvent:
    model = SERVER_EVENT_MODELS[event_type]
    try:
        return model.model_validate(data)
    except ValidationError as e:
        # Fields are coerced leniently, so only unusable extra keys get here
        log.warning(f"Typed frame '{event_type}' kept without its payload: {e.error_count()} error(s)")
        return model()

