"""Chat client entry point: composition root for a conversation session."""

import logging

from application.orchestrator import ConversationContext, ConversationOrchestrator, RefreshHook
from application.settings import Settings, app_settings, configure_logging
from application.websocket import SocketConnector
from infrastructure.adapters import WebsocketsConnector

configure_logging(log_level=app_settings.log_level)
log = logging.getLogger(__name__)


def create_conversation(
    settings: Settings | None = None,
    connector: SocketConnector | None = None,
    refresh_conversations: RefreshHook | None = None,
) -> ConversationOrchestrator:
    """Create the orchestrator of one conversation session.

    Call ``await orchestrator.start()`` from a running event loop to open
    the socket, and ``await orchestrator.close()`` when the session ends.

    Args:
        settings: Client configuration (defaults to environment settings)
        connector: Socket opener (defaults to the websockets adapter)
        refresh_conversations: Hook refreshing the external conversation list

    Returns:
        A ready-to-start ConversationOrchestrator
    """
    settings = settings or app_settings
    connector = connector or WebsocketsConnector.from_settings(settings)

    context = ConversationContext.create(settings, connector, refresh_conversations)
    log.info(f"{settings.app_name} {settings.app_version}: conversation session created for {settings.ws_url}")
    return ConversationOrchestrator(context)
