"""Conversation orchestration.

Modules:
- chat_state: Observable UI-facing state
- stream_assembler: The single active streamed answer
- scheduled_task: Cancellable one-shot tasks (deferred send, stall watchdog)
- context: Per-conversation collaborators
- orchestrator: Event dispatch and outbound turns
"""

from application.orchestrator.chat_state import ChatState, ObservableValue
from application.orchestrator.context import ConversationContext, RefreshHook
from application.orchestrator.orchestrator import ConversationOrchestrator
from application.orchestrator.scheduled_task import OneShotTask
from application.orchestrator.stream_assembler import StreamAssembler

__all__ = [
    "ChatState",
    "ConversationContext",
    "ConversationOrchestrator",
    "ObservableValue",
    "OneShotTask",
    "RefreshHook",
    "StreamAssembler",
]
