"""Domain models for the chat client.

Value objects and the transcript message model.
"""

from domain.models.banner import Banner, BannerSeverity
from domain.models.conversation_identity import ConversationIdentity
from domain.models.message import Citation, Message, MessageKind, MessageRole

__all__ = [
    "Banner",
    "BannerSeverity",
    "Citation",
    "ConversationIdentity",
    "Message",
    "MessageKind",
    "MessageRole",
]
