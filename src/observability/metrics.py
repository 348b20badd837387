"""Client metrics for the chat streaming engine.

Defines OpenTelemetry metrics for the streaming client:
- Frames: Inbound traffic and normalization fallbacks
- Streams: Assembled answers
- Messages: Outbound user turns
- Connections: Socket lifecycle and transport failures
"""

from opentelemetry import metrics

meter = metrics.get_meter(__name__)

# =============================================================================
# FRAME METRICS
# =============================================================================

frames_received = meter.create_counter(
    name="copilot_client.frames.received",
    description="Total inbound frames received",
    unit="1",
)

frames_unrecognized = meter.create_counter(
    name="copilot_client.frames.unrecognized",
    description="Total inbound JSON frames matching no known shape",
    unit="1",
)

# =============================================================================
# STREAM METRICS
# =============================================================================

tokens_received = meter.create_counter(
    name="copilot_client.tokens.received",
    description="Total streamed answer chunks received",
    unit="1",
)

streams_completed = meter.create_counter(
    name="copilot_client.streams.completed",
    description="Total streamed answers finalized",
    unit="1",
)

# =============================================================================
# MESSAGE METRICS
# =============================================================================

messages_sent = meter.create_counter(
    name="copilot_client.messages.sent",
    description="Total user messages accepted for sending",
    unit="1",
)

messages_rejected = meter.create_counter(
    name="copilot_client.messages.rejected",
    description="Total user messages rejected (blank, or a turn in flight)",
    unit="1",
)

# =============================================================================
# CONNECTION METRICS
# =============================================================================

connections_opened = meter.create_counter(
    name="copilot_client.connections.opened",
    description="Total sockets that reached the open state",
    unit="1",
)

connection_errors = meter.create_counter(
    name="copilot_client.connection.errors",
    description="Total transport failures",
    unit="1",
)
