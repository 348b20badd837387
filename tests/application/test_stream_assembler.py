"""Tests for StreamAssembler."""

from application.orchestrator import ChatState, StreamAssembler
from domain.models import Citation, MessageKind, MessageRole


def _streaming_count(state: ChatState) -> int:
    return sum(1 for message in state.messages.value if message.streaming)


class TestStreamAssembler:
    """Test assembly of a streamed answer."""

    def test_chunks_concatenate_in_order(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)

        assembler.ensure_bubble(["deck.pdf"])
        for chunk in ["Rev", "enue ", "grew", ""]:
            assert assembler.append_chunk(chunk)

        message = state.messages.value[0]
        assert message.role == MessageRole.ASSISTANT
        assert message.text == "Revenue grew"
        assert message.streaming

    def test_ensure_bubble_reuses_active_message(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)

        first = assembler.ensure_bubble(["a"])
        second = assembler.ensure_bubble(["b"])

        assert first is second
        assert len(state.messages.value) == 1
        assert _streaming_count(state) == 1
        assert first.sources == ["a"]

    def test_chunk_without_active_stream_is_dropped(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)

        assert not assembler.append_chunk("orphan")
        assert state.messages.value == []

    def test_finalize_keeps_announced_sources_when_end_has_none(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)
        assembler.ensure_bubble(["deck.pdf"])
        assembler.append_chunk("Answer")

        message = assembler.finalize([])

        assert message is not None
        assert not message.streaming
        assert message.sources == ["deck.pdf"]
        assert message.text == "Answer"
        assert not assembler.is_active
        assert _streaming_count(state) == 0

    def test_finalize_attaches_end_metadata(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)
        assembler.ensure_bubble([])

        message = assembler.finalize(
            ["final.pdf"],
            citations=[Citation(title="Final", page="2")],
            follow_ups=["What about EMEA?"],
            kind=MessageKind.GUARDRAIL_OOS,
        )

        assert message.sources == ["final.pdf"]
        assert message.citations == [Citation(title="Final", page="2")]
        assert message.follow_ups == ["What about EMEA?"]
        assert message.kind == MessageKind.GUARDRAIL_OOS

    def test_finalize_without_active_stream(self) -> None:
        assembler = StreamAssembler(ChatState())

        assert assembler.finalize(["x"]) is None

    def test_new_bubble_after_finalize(self) -> None:
        state = ChatState()
        assembler = StreamAssembler(state)
        first = assembler.ensure_bubble([])
        assembler.finalize([])

        second = assembler.ensure_bubble([])

        assert first is not second
        assert len(state.messages.value) == 2
        assert _streaming_count(state) == 1
