import pytest

from chat_sandbox.chat.schemas import Message, RoleEnum
from chat_sandbox.chat.state import ConversationState
from chat_sandbox.compaction.config import COMPRESSED_HISTORY_PREFIX
from chat_sandbox.compaction.formatter import build_api_payload, build_compaction_text, build_raw_messages
from chat_sandbox.compaction.service import CompactionController, CompactionState, should_trigger_compaction
from chat_sandbox.compression.exceptions import CompressionError
from chat_sandbox.compression.schemas import CompressionResult
from chat_sandbox.config import SEED_GREETING
from chat_sandbox.stats.service import StatsAccumulator

pytestmark = [pytest.mark.unit]

SYSTEM_PROMPT = "Be brief."


def _conversation(*turns: tuple[str, str], compressed_history: str | None = None) -> ConversationState:
    state = ConversationState(system_prompt=SYSTEM_PROMPT, compressed_history=compressed_history)
    for role, content in turns:
        state.append_turn(Message(role=RoleEnum(role), content=content))
    return state


class TestBuildApiPayload:
    def test_without_compression_sends_every_turn(self):
        state = ConversationState.initial(SYSTEM_PROMPT)
        state.append_turn(Message(role=RoleEnum.user, content="Hi"))

        payload = build_api_payload(state)

        assert [m.role for m in payload] == [RoleEnum.system, RoleEnum.assistant, RoleEnum.user]
        assert payload[0].content == SYSTEM_PROMPT
        assert payload[1].content == SEED_GREETING
        assert payload[2].content == "Hi"

    def test_compressed_history_is_second(self):
        state = _conversation(("user", "Next question"), compressed_history="summary")

        payload = build_api_payload(state)

        assert payload[0] == Message(role=RoleEnum.system, content=SYSTEM_PROMPT)
        assert payload[1].is_compressed_history
        assert payload[1].role == RoleEnum.system
        assert payload[1].content == f"{COMPRESSED_HISTORY_PREFIX}summary"
        assert payload[2].content == "Next question"
        assert sum(m.is_compressed_history for m in payload) == 1

    def test_after_compression_only_the_tail_is_sent(self):
        state = _conversation(("user", "old"), ("assistant", "old reply"), ("user", "new"), compressed_history="s")
        state.messages_since_compression = 1

        payload = build_api_payload(state)

        assert [m.content for m in payload[2:]] == ["new"]

    def test_after_compression_with_zero_counter_sends_no_turns(self):
        state = _conversation(("user", "stale"), compressed_history="s")
        state.messages_since_compression = 0

        payload = build_api_payload(state)

        assert len(payload) == 2

    def test_marker_entries_in_api_messages_are_skipped(self):
        state = _conversation(("user", "Hi"))
        state.api_messages.insert(
            0, Message(role=RoleEnum.system, content="stale marker", is_compressed_history=True)
        )

        payload = build_api_payload(state)

        assert all(not m.is_compressed_history for m in payload)
        assert [m.content for m in payload] == [SYSTEM_PROMPT, "Hi"]

    def test_is_idempotent(self):
        state = _conversation(("user", "a"), ("assistant", "b"), compressed_history="s")
        assert build_api_payload(state) == build_api_payload(state)

    def test_raw_messages_include_every_held_turn(self):
        state = _conversation(("user", "old"), ("user", "new"), compressed_history="s")
        state.messages_since_compression = 1

        assert [m.content for m in build_raw_messages(state)] == [
            SYSTEM_PROMPT,
            f"{COMPRESSED_HISTORY_PREFIX}s",
            "old",
            "new",
        ]


class TestBuildCompactionText:
    def test_turns_get_protected_labels(self):
        state = _conversation(("user", "What is 2+2?"), ("assistant", "4."))

        text = build_compaction_text(state, state.pending_turns())

        assert text == "<ttc_safe>User:</ttc_safe> What is 2+2?\n\n<ttc_safe>Assistant:</ttc_safe> 4."

    def test_previous_summary_comes_first(self):
        state = _conversation(("user", "And Rome?"), compressed_history="User asked about Paris.")

        text = build_compaction_text(state, state.pending_turns())

        assert text == "User asked about Paris.\n\n<ttc_safe>User:</ttc_safe> And Rome?"

    def test_markers_are_never_compressed(self):
        state = _conversation(("user", "Hi"))
        marker = Message(role=RoleEnum.system, content="Previous conversation context:\nx", is_compressed_history=True)

        text = build_compaction_text(state, [marker, *state.pending_turns()])

        assert "Previous conversation context" not in text

    def test_trailing_whitespace_is_trimmed(self):
        state = _conversation(("assistant", "Bye   \n"))
        assert not build_compaction_text(state, state.pending_turns()).endswith((" ", "\n"))


class TestShouldTriggerCompaction:
    @pytest.mark.parametrize("count, expected", [(0, False), (4, False), (5, True), (6, True)])
    def test_threshold(self, count, expected):
        state = ConversationState(system_prompt=SYSTEM_PROMPT, messages_since_compression=count)
        assert should_trigger_compaction(state, 5) is expected


class TestCompactionController:
    async def test_successful_compaction_replaces_turns(self, compression_client, model):
        stats = StatsAccumulator()
        controller = CompactionController(compression_client, stats)
        state = _conversation(("user", "Hi"), ("assistant", "Hello"), ("user", "Tell me a joke"))
        display_before = list(state.display_messages)

        outcome = await controller.perform_compaction(state, aggressiveness=0.9, model=model)

        compression_client.compress.assert_awaited_once()
        text, aggressiveness = compression_client.compress.call_args.args
        assert text.startswith("<ttc_safe>User:</ttc_safe> Hi")
        assert aggressiveness == 0.9

        assert state.compressed_history == "summary"
        assert state.messages_since_compression == 0
        assert state.pending_turns() == []
        assert state.display_messages == display_before

        assert outcome.performed
        assert outcome.tokens_saved == 80
        assert outcome.compression_ratio == pytest.approx(80.0)
        assert outcome.latency_ms == 120
        assert stats.stats.saved_tokens == 80
        assert stats.stats.total_compressed_tokens == 20
        assert controller.state == CompactionState.IDLE

    async def test_nothing_to_compact_is_a_no_op(self, compression_client):
        controller = CompactionController(compression_client, StatsAccumulator())
        state = ConversationState(system_prompt=SYSTEM_PROMPT)

        outcome = await controller.perform_compaction(state, aggressiveness=0.5)

        assert not outcome.performed
        assert outcome.error is None
        compression_client.compress.assert_not_called()

    async def test_failed_compaction_leaves_state_untouched(self, compression_client):
        compression_client.compress.side_effect = CompressionError("Compression failed: network unreachable")
        stats = StatsAccumulator()
        controller = CompactionController(compression_client, stats)
        state = _conversation(("user", "Hi"), ("assistant", "Hello"), compressed_history="earlier")
        before = state.model_copy(deep=True)

        outcome = await controller.perform_compaction(state, aggressiveness=0.5)

        assert not outcome.performed
        assert "network unreachable" in outcome.error
        assert state == before
        assert stats.stats.saved_tokens == 0
        assert controller.state == CompactionState.IDLE

    async def test_expanding_compaction_reports_negative_savings(self, compression_client, model):
        compression_client.compress.return_value = CompressionResult(
            output="a much longer summary", output_tokens=30, original_input_tokens=25
        )
        stats = StatsAccumulator()
        controller = CompactionController(compression_client, stats)
        state = _conversation(("user", "Hi"))

        outcome = await controller.perform_compaction(state, aggressiveness=0.1, model=model)

        assert outcome.performed
        assert outcome.tokens_saved == -5
        assert outcome.money_saved < 0
        assert stats.stats.saved_tokens == -5
        assert stats.stats.total_compressed_tokens == 30

    async def test_second_compaction_feeds_previous_summary(self, compression_client):
        controller = CompactionController(compression_client, StatsAccumulator())
        state = _conversation(("user", "Hi"))
        await controller.perform_compaction(state, aggressiveness=0.5)
        state.append_turn(Message(role=RoleEnum.assistant, content="Hello"))

        await controller.perform_compaction(state, aggressiveness=0.5)

        text = compression_client.compress.call_args.args[0]
        assert text == "summary\n\n<ttc_safe>Assistant:</ttc_safe> Hello"
