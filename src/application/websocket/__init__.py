"""Client WebSocket connection management."""

from application.websocket.manager import ConnectionManager, EventListener, SocketConnection, SocketConnector, StateListener
from application.websocket.state import ConnectionState, ConnectionStateMachine, StateTransition

__all__ = [
    "ConnectionManager",
    "ConnectionState",
    "ConnectionStateMachine",
    "EventListener",
    "SocketConnection",
    "SocketConnector",
    "StateListener",
    "StateTransition",
]
