"""WebSocket Connection State Machine.

Implements the client-side socket lifecycle.

States:
    DISCONNECTED → CONNECTING → OPEN → CLOSED → DISCONNECTED
    CONNECTING → CLOSED (the socket never opened)
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

log = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """Connection lifecycle states."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


# Valid state transitions
_VALID_TRANSITIONS: dict[ConnectionState, set[ConnectionState]] = {
    ConnectionState.DISCONNECTED: {ConnectionState.CONNECTING},
    ConnectionState.CONNECTING: {ConnectionState.OPEN, ConnectionState.CLOSED},
    ConnectionState.OPEN: {ConnectionState.CLOSED},
    ConnectionState.CLOSED: {ConnectionState.DISCONNECTED},
}


@dataclass
class StateTransition:
    """Record of a state transition."""

    from_state: ConnectionState
    to_state: ConnectionState
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    reason: str | None = None


class ConnectionStateMachine:
    """State machine for the client socket lifecycle.

    Transitions are totally ordered; the machine keeps its history for
    debugging. Synchronization is left to the owner (ConnectionManager),
    which only mutates it from the event loop thread.
    """

    def __init__(self, initial_state: ConnectionState = ConnectionState.DISCONNECTED):
        """Initialize the state machine.

        Args:
            initial_state: The starting state (default: DISCONNECTED)
        """
        self._state = initial_state
        self._history: list[StateTransition] = []
        log.debug(f"State machine initialized in state: {initial_state.value}")

    @property
    def state(self) -> ConnectionState:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        """Get the transition history."""
        return self._history.copy()

    @property
    def is_busy(self) -> bool:
        """Check if a socket is opening or open."""
        return self._state in {ConnectionState.CONNECTING, ConnectionState.OPEN}

    @property
    def can_send_messages(self) -> bool:
        """Check if frames can be written right now."""
        return self._state == ConnectionState.OPEN

    def can_transition_to(self, new_state: ConnectionState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            new_state: The target state

        Returns:
            True if the transition is valid, False otherwise
        """
        valid_targets = _VALID_TRANSITIONS.get(self._state, set())
        return new_state in valid_targets

    def transition_to(self, new_state: ConnectionState, reason: str | None = None) -> bool:
        """Attempt to transition to a new state.

        Args:
            new_state: The target state
            reason: Optional reason for the transition

        Returns:
            True if the transition succeeded, False if it was invalid
        """
        if not self.can_transition_to(new_state):
            log.warning(f"Invalid state transition: {self._state.value} → {new_state.value} (valid targets: {[s.value for s in _VALID_TRANSITIONS.get(self._state, set())]})")
            return False

        old_state = self._state
        self._state = new_state
        self._history.append(StateTransition(from_state=old_state, to_state=new_state, reason=reason))

        log.debug(f"State transition: {old_state.value} → {new_state.value}" + (f" (reason: {reason})" if reason else ""))
        return True

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"ConnectionStateMachine(state={self._state.value}, transitions={len(self._history)})"
