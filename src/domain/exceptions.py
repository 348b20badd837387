"""Domain exceptions for the chat client.

Transport failures are raised by the socket adapter and converted into
canonical ``error`` events by the ConnectionManager; they never reach the
presentation layer.
"""


class ChatClientError(Exception):
    """Base exception for chat client failures.

    Attributes:
        message: Human-readable description of the failure.
        code: Optional error code for programmatic handling.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class TransportError(ChatClientError):
    """Raised when the socket cannot be opened or written to."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.url = url


class NotConnectedError(ChatClientError):
    """Raised when a frame is written to a socket that is not open."""

    def __init__(self) -> None:
        super().__init__("Socket is not open", code="NOT_CONNECTED")
