"""Tests for message and project analytics."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from cclens.data.parser import parse_transcript
from cclens.models.messages import Message, ToolUseBlock
from cclens.models.sessions import ParsedSession
from cclens.services.analytics import (
    SessionRecord,
    aggregate_project_stats,
    count_lines_written,
    time_spent_ms,
)


def _assistant(*blocks: object, timestamp: str = "") -> Message:
    return Message(
        uuid="a", type="assistant", role="assistant", timestamp=timestamp, content=list(blocks)
    )


def test_count_lines_written() -> None:
    messages = [
        _assistant(
            ToolUseBlock(name="Write", input={"content": "a\nb\nc"}),
            ToolUseBlock(name="Edit", input={"new_string": "x"}),
            ToolUseBlock(name="Edit", input={"new_string": ""}),
            ToolUseBlock(name="Read", input={"content": "ignored\nlines"}),
            ToolUseBlock(name="Write", input={"content": 42}),
        )
    ]
    assert count_lines_written(messages) == 4


def test_aggregate_project_stats(sample_session_text: str) -> None:
    parsed = parse_transcript(sample_session_text)
    early = datetime(2026, 1, 1, tzinfo=UTC)
    late = datetime(2026, 2, 1, tzinfo=UTC)
    stats = aggregate_project_stats(
        [
            SessionRecord(parsed=parsed, last_modified=late),
            SessionRecord(parsed=ParsedSession(), last_modified=early),
        ]
    )
    assert stats.session_count == 2
    assert stats.total_messages == 6
    assert stats.total_tool_calls == 3
    assert stats.total_cost == pytest.approx(0.0113)
    assert stats.time_spent_ms == 25_000
    assert stats.lines_written == 2
    assert stats.first_session == early
    assert stats.last_session == late


def test_aggregate_project_stats_empty() -> None:
    stats = aggregate_project_stats([])
    assert stats.session_count == 0
    assert stats.first_session is None


def test_time_spent_uses_earliest_and_latest_timestamps() -> None:
    messages = [
        _assistant(timestamp="2026-01-01T00:00:05Z"),
        _assistant(timestamp="2026-01-01T00:00:01Z"),
        _assistant(timestamp="not a time"),
        _assistant(timestamp="2026-01-01T00:00:03Z"),
        Message(uuid="h", type="hook", role="assistant", timestamp="2026-01-01T00:01:00Z"),
    ]
    assert time_spent_ms(messages) == 4_000


def test_time_spent_without_timestamps() -> None:
    assert time_spent_ms([_assistant()]) == 0
    assert time_spent_ms([]) == 0
