"""Tests for SessionTracker."""

from application.session import SessionTracker


class TestSessionTracker:
    """Test identity bookkeeping."""

    def test_starts_anonymous(self) -> None:
        tracker = SessionTracker()

        assert tracker.identity.is_anonymous
        assert tracker.session_id is None
        assert tracker.conversation_id is None

    def test_update_records_ids_verbatim(self) -> None:
        tracker = SessionTracker()

        tracker.update("s-1", "c-1")

        assert tracker.session_id == "s-1"
        assert tracker.conversation_id == "c-1"

    def test_update_replaces_previous_identity(self) -> None:
        tracker = SessionTracker()
        tracker.update("s-1", "c-1")

        tracker.update("s-2", None)

        assert tracker.session_id == "s-2"
        assert tracker.conversation_id is None

    def test_clear_forgets_both_ids(self) -> None:
        tracker = SessionTracker()
        tracker.update("s-1", "c-1")

        tracker.clear()

        assert tracker.identity.is_anonymous
        assert tracker.identity.to_query_params() == {}
