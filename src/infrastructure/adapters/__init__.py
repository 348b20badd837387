"""Infrastructure adapters for the chat client."""

from infrastructure.adapters.websocket_transport import WebsocketsConnection, WebsocketsConnector

__all__ = [
    "WebsocketsConnection",
    "WebsocketsConnector",
]
