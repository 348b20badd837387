"""Infrastructure layer: concrete transport implementations."""

from .adapters import WebsocketsConnection, WebsocketsConnector

__all__ = [
    "WebsocketsConnection",
    "WebsocketsConnector",
]
