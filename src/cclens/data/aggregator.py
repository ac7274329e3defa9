"""Running session counters and summary resolution."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from cclens.models.entries import RawConversationEntry, RawUserEntry
from cclens.models.messages import Message, TextBlock, ToolUseBlock
from cclens.models.sessions import SessionStats

EMPTY_SESSION_SUMMARY = "Empty session"
DEFAULT_SUMMARY_LENGTH = 100
_ELLIPSIS = "..."


@dataclass
class SessionAccumulator:
    """Accumulated statistics while parsing a session."""

    prompt_count: int = 0
    message_count: int = 0
    tool_call_count: int = 0
    calculated_cost_usd: float = 0.0
    legacy_cost_usd: float = 0.0
    first_timestamp: str | None = None
    last_timestamp: str | None = None
    summary: str = ""
    tool_counts: Counter[str] = field(default_factory=Counter)

    def observe_summary(self, text: str) -> None:
        self.summary = text

    def observe(self, entry: RawConversationEntry, message: Message) -> None:
        """Count one user/assistant entry and the message built from it."""
        if isinstance(entry, RawUserEntry):
            self.prompt_count += 1
        self.message_count += 1

        if entry.timestamp:
            if self.first_timestamp is None:
                self.first_timestamp = entry.timestamp
            self.last_timestamp = entry.timestamp

        if entry.cost_usd and math.isfinite(entry.cost_usd):
            self.legacy_cost_usd += entry.cost_usd
        if message.usage is not None:
            self.calculated_cost_usd += message.usage.cost_usd

        for block in message.content:
            if isinstance(block, ToolUseBlock):
                self.tool_call_count += 1
                if block.name:
                    self.tool_counts[block.name] += 1

    def build_stats(self, page_size: int) -> SessionStats:
        # Recomputed cost wins; the inline field only covers old logs without usage.
        total_cost = self.calculated_cost_usd or self.legacy_cost_usd
        return SessionStats(
            prompt_count=self.prompt_count,
            message_count=self.message_count,
            tool_call_count=self.tool_call_count,
            total_cost_usd=max(total_cost, 0.0),
            total_pages=math.ceil(self.message_count / max(page_size, 1)),
            duration_ms=_duration_ms(self.first_timestamp, self.last_timestamp),
            start_timestamp=self.first_timestamp,
            end_timestamp=self.last_timestamp,
            tool_breakdown=dict(self.tool_counts),
        )


def resolve_summary(
    explicit: str,
    messages: Sequence[Message],
    max_length: int = DEFAULT_SUMMARY_LENGTH,
) -> str:
    """Explicit summary, else the first user prompt, else a placeholder."""
    if explicit:
        return explicit
    return generate_summary(messages, max_length)


def generate_summary(messages: Sequence[Message], max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """Generate a summary from the first user message."""
    first_user = next((m for m in messages if m.type == "user"), None)
    if first_user is None:
        return EMPTY_SESSION_SUMMARY

    text = " ".join(b.text for b in first_user.content if isinstance(b, TextBlock))
    if len(text) <= max_length:
        return text
    return text[: max(max_length - len(_ELLIPSIS), 0)] + _ELLIPSIS


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _duration_ms(first: str | None, last: str | None) -> int:
    start = parse_timestamp(first)
    end = parse_timestamp(last)
    if start is None or end is None:
        return 0
    return max(0, (end - start) // timedelta(milliseconds=1))
