"""Observable conversation state consumed by the presentation layer.

Each piece of state is an ``ObservableValue``: a value holder with a list
of change callbacks. The presentation layer reads and subscribes; only the
orchestrator and the stream assembler write.
"""

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from application.websocket.state import ConnectionState
from domain.models import Banner, Message

log = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], None]


class ObservableValue(Generic[T]):
    """A mutable value that notifies subscribers when it changes."""

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value, notifying subscribers unless it is unchanged."""
        if value is self._value:
            return
        self._value = value
        self.notify()

    def notify(self) -> None:
        """Push the current value to every subscriber.

        Callers mutating the held object in place must call this themselves.
        """
        for subscriber in list(self._subscribers):
            try:
                subscriber(self._value)
            except Exception as e:
                log.error(f"Error in state subscriber: {e}")

    def subscribe(self, subscriber: Subscriber[T]) -> Callable[[], None]:
        """Register a change callback.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def __repr__(self) -> str:
        return f"ObservableValue({self._value!r})"


class ChatState:
    """All UI-facing state of one conversation session.

    Attributes:
        messages: The ordered transcript; entries are appended, never removed
        typing: True while a sent turn awaits its first streamed token
        banner: The current alert, if any
        active_conversation_id: The conversation highlighted in the sidebar
        connection_state: Mirror of the socket lifecycle
    """

    def __init__(self) -> None:
        self.messages: ObservableValue[list[Message]] = ObservableValue([])
        self.typing: ObservableValue[bool] = ObservableValue(False)
        self.banner: ObservableValue[Banner | None] = ObservableValue(None)
        self.active_conversation_id: ObservableValue[str | None] = ObservableValue(None)
        self.connection_state: ObservableValue[ConnectionState] = ObservableValue(ConnectionState.DISCONNECTED)

    @property
    def is_streaming(self) -> bool:
        """True while some message is still receiving tokens."""
        return any(message.streaming for message in self.messages.value)

    def append_message(self, message: Message) -> None:
        self.messages.value.append(message)
        self.messages.notify()

    def append_messages(self, messages: list[Message]) -> None:
        if not messages:
            return
        self.messages.value.extend(messages)
        self.messages.notify()

    def start_transcript(self) -> None:
        """Begin a fresh transcript with no typing indicator or banner."""
        self.messages.set([])
        self.typing.set(False)
        self.banner.set(None)
