"""Analytics over parsed sessions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from cclens.data.aggregator import parse_timestamp
from cclens.models.messages import Message, ToolUseBlock
from cclens.models.projects import ProjectStats
from cclens.models.sessions import ParsedSession


@dataclass(frozen=True)
class SessionRecord:
    """A parsed session together with its file modification time."""

    parsed: ParsedSession
    last_modified: datetime


def count_lines_written(messages: Iterable[Message]) -> int:
    """Lines of code written through the Write and Edit tools."""
    lines = 0
    for message in messages:
        for block in message.content:
            if not isinstance(block, ToolUseBlock):
                continue
            match block.name:
                case "Write":
                    written = block.input.get("content")
                case "Edit":
                    written = block.input.get("new_string")
                case _:
                    continue
            if isinstance(written, str) and written:
                lines += len(written.split("\n"))
    return lines


def time_spent_ms(messages: Iterable[Message]) -> int:
    """Span between the earliest and latest user/assistant timestamps.

    Unlike ``SessionStats.duration_ms`` this ignores file order, so logs with
    out-of-order entries still count their full span.
    """
    stamps = [
        stamp
        for message in messages
        if message.type in ("user", "assistant")
        and (stamp := parse_timestamp(message.timestamp)) is not None
    ]
    if not stamps:
        return 0
    return (max(stamps) - min(stamps)) // timedelta(milliseconds=1)


def aggregate_project_stats(sessions: Sequence[SessionRecord]) -> ProjectStats:
    """Aggregate efficiency statistics over every session of a project."""
    stats = ProjectStats(session_count=len(sessions))
    for record in sessions:
        parsed = record.parsed
        stats.total_cost += parsed.stats.total_cost_usd
        stats.time_spent_ms += time_spent_ms(parsed.messages)
        stats.total_messages += parsed.stats.message_count
        stats.total_tool_calls += parsed.stats.tool_call_count
        stats.lines_written += count_lines_written(parsed.messages)

        if stats.first_session is None or record.last_modified < stats.first_session:
            stats.first_session = record.last_modified
        if stats.last_session is None or record.last_modified > stats.last_session:
            stats.last_session = record.last_modified
    return stats
