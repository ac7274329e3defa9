"""Tests for session counters and summary helpers."""

from __future__ import annotations

from datetime import UTC, datetime

from cclens.data.aggregator import (
    EMPTY_SESSION_SUMMARY,
    SessionAccumulator,
    generate_summary,
    parse_timestamp,
    resolve_summary,
)
from cclens.models.entries import RawAssistantEntry, RawUserEntry
from cclens.models.messages import (
    Message,
    TextBlock,
    TokenUsage,
    ToolResultBlock,
    ToolUseBlock,
)


def _user_message(*blocks: object) -> Message:
    return Message(uuid="u", type="user", role="user", content=list(blocks))


def test_parse_timestamp() -> None:
    assert parse_timestamp("2026-01-01T00:00:00Z") == datetime(2026, 1, 1, tzinfo=UTC)
    assert parse_timestamp("2026-01-01T00:00:00") == datetime(2026, 1, 1, tzinfo=UTC)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None


def test_generate_summary_skips_non_user_messages() -> None:
    messages = [
        Message(uuid="a", type="assistant", role="assistant", content=[TextBlock(text="hi")]),
        _user_message(TextBlock(text="real prompt")),
    ]
    assert generate_summary(messages) == "real prompt"


def test_generate_summary_tool_result_only_prompt_is_empty() -> None:
    messages = [_user_message(ToolResultBlock(tool_use_id="t1", content="x"))]
    assert generate_summary(messages) == ""


def test_generate_summary_without_user_messages() -> None:
    assert generate_summary([]) == EMPTY_SESSION_SUMMARY


def test_resolve_summary_prefers_explicit() -> None:
    messages = [_user_message(TextBlock(text="prompt"))]
    assert resolve_summary("explicit", messages) == "explicit"
    assert resolve_summary("", messages) == "prompt"


class TestSessionAccumulator:
    def test_counts_prompts_messages_and_tools(self) -> None:
        acc = SessionAccumulator()
        user = RawUserEntry.model_validate(
            {
                "type": "user",
                "uuid": "u1",
                "timestamp": "2026-01-01T00:00:00Z",
                "message": {"role": "user", "content": "go"},
            }
        )
        assistant = RawAssistantEntry.model_validate(
            {
                "type": "assistant",
                "uuid": "a1",
                "timestamp": "2026-01-01T00:00:02Z",
                "costUsd": 3.0,
                "message": {"role": "assistant", "content": []},
            }
        )
        acc.observe(user, _user_message(TextBlock(text="go")))
        acc.observe(
            assistant,
            Message(
                uuid="a1",
                type="assistant",
                role="assistant",
                content=[ToolUseBlock(id="t1", name="Bash"), ToolUseBlock(id="t2", name="Bash")],
                usage=TokenUsage(cost_usd=0.5),
            ),
        )

        stats = acc.build_stats(page_size=1)
        assert stats.prompt_count == 1
        assert stats.message_count == 2
        assert stats.tool_call_count == 2
        assert stats.tool_breakdown == {"Bash": 2}
        assert stats.total_cost_usd == 0.5
        assert stats.total_pages == 2
        assert stats.duration_ms == 2_000

    def test_empty_accumulator(self) -> None:
        stats = SessionAccumulator().build_stats(page_size=20)
        assert stats.message_count == 0
        assert stats.total_pages == 0
        assert stats.total_cost_usd == 0.0
        assert stats.start_timestamp is None

    def test_unnamed_tool_counts_but_is_not_broken_down(self) -> None:
        acc = SessionAccumulator()
        entry = RawAssistantEntry.model_validate(
            {
                "type": "assistant",
                "uuid": "a",
                "timestamp": "",
                "message": {"role": "assistant", "content": []},
            }
        )
        acc.observe(
            entry,
            Message(uuid="a", type="assistant", role="assistant", content=[ToolUseBlock(id="t")]),
        )
        stats = acc.build_stats(page_size=20)
        assert stats.tool_call_count == 1
        assert stats.tool_breakdown == {}
