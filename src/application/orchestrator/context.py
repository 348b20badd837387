"""Per-conversation context.

One ``ConversationContext`` is constructed per conversation session and
handed to the orchestrator; every collaborator it holds lives exactly as
long as that session.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from application.orchestrator.chat_state import ChatState
from application.orchestrator.stream_assembler import StreamAssembler
from application.session import SessionTracker
from application.settings import Settings
from application.websocket import ConnectionManager, SocketConnector

# External conversation-list refresh; may be sync or async, its result is ignored
RefreshHook = Callable[[], Awaitable[None] | None]


@dataclass
class ConversationContext:
    """Collaborators of one conversation session.

    Attributes:
        settings: Client configuration
        session_tracker: Backend-assigned identity, survives reconnects
        connection_manager: Owner of the socket and pending queue
        state: Observable UI state
        assembler: Owner of the single active stream
        refresh_conversations: Optional hook refreshing the conversation list
    """

    settings: Settings
    session_tracker: SessionTracker
    connection_manager: ConnectionManager
    state: ChatState
    assembler: StreamAssembler
    refresh_conversations: RefreshHook | None = field(default=None)

    @classmethod
    def create(
        cls,
        settings: Settings,
        connector: SocketConnector,
        refresh_conversations: RefreshHook | None = None,
    ) -> "ConversationContext":
        """Wire a fresh set of collaborators.

        Args:
            settings: Client configuration (``ws_url`` is the endpoint)
            connector: Coroutine function opening a socket for a URL
            refresh_conversations: Optional conversation-list refresh hook

        Returns:
            A new context with an anonymous identity and an empty transcript
        """
        session_tracker = SessionTracker()
        state = ChatState()
        return cls(
            settings=settings,
            session_tracker=session_tracker,
            connection_manager=ConnectionManager(settings.ws_url, session_tracker, connector),
            state=state,
            assembler=StreamAssembler(state),
            refresh_conversations=refresh_conversations,
        )
