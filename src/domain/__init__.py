"""Domain layer for the chat client.

Contains:
- exceptions: Client-side failure types
- models/: Transcript message, identity and banner value objects
"""

from domain.exceptions import ChatClientError, NotConnectedError, TransportError
from domain.models import Banner, Citation, ConversationIdentity, Message, MessageKind, MessageRole

__all__ = [
    "Banner",
    "ChatClientError",
    "Citation",
    "ConversationIdentity",
    "Message",
    "MessageKind",
    "MessageRole",
    "NotConnectedError",
    "TransportError",
]
