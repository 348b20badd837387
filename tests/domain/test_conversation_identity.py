"""Domain layer tests for ConversationIdentity and the domain exceptions."""

import pytest

from domain.exceptions import ChatClientError, NotConnectedError, TransportError
from domain.models import Banner, ConversationIdentity


class TestConversationIdentity:
    """Test identity query parameters."""

    def test_new_identity_is_anonymous(self) -> None:
        identity = ConversationIdentity()

        assert identity.is_anonymous
        assert identity.to_query_params() == {}

    def test_query_params_include_both_ids(self) -> None:
        identity = ConversationIdentity(session_id="s-1", conversation_id="c-1")

        assert not identity.is_anonymous
        assert identity.to_query_params() == {"session_id": "s-1", "conversation_id": "c-1"}

    @pytest.mark.parametrize(
        ("session_id", "conversation_id", "expected"),
        [
            ("s-1", None, {"session_id": "s-1"}),
            (None, "c-1", {"conversation_id": "c-1"}),
            ("", "c-1", {"conversation_id": "c-1"}),
        ],
    )
    def test_query_params_omit_missing_ids(self, session_id, conversation_id, expected) -> None:
        identity = ConversationIdentity(session_id=session_id, conversation_id=conversation_id)

        assert identity.to_query_params() == expected


class TestBanner:
    """Test the Banner value object."""

    def test_severity_defaults_to_error(self) -> None:
        assert Banner("Something broke").severity == "error"


class TestExceptions:
    """Test the domain exception hierarchy."""

    def test_transport_error_carries_code_and_url(self) -> None:
        error = TransportError("Handshake failed", url="ws://x/ws")

        assert isinstance(error, ChatClientError)
        assert error.code == "TRANSPORT_ERROR"
        assert error.url == "ws://x/ws"
        assert str(error) == "[TRANSPORT_ERROR] Handshake failed"

    def test_not_connected_error(self) -> None:
        error = NotConnectedError()

        assert error.code == "NOT_CONNECTED"
        assert "not open" in str(error)

    def test_error_without_code(self) -> None:
        assert str(ChatClientError("plain")) == "plain"
