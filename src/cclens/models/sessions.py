"""Session-level models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from cclens.models.messages import Message


class SessionStats(BaseModel):
    """Counters derived from one parse of a session log."""

    prompt_count: int = 0
    message_count: int = 0
    tool_call_count: int = 0
    total_cost_usd: float = 0.0
    total_pages: int = 0
    duration_ms: int = 0
    start_timestamp: str | None = None
    end_timestamp: str | None = None
    tool_breakdown: dict[str, int] = Field(default_factory=dict)


class ParsedSession(BaseModel):
    """Result of a full parse: messages in file order, stats and summary."""

    messages: list[Message] = Field(default_factory=list)
    stats: SessionStats = Field(default_factory=SessionStats)
    summary: str = ""


class PaginatedMessages(BaseModel):
    """A newest-first page of messages."""

    messages: list[Message] = Field(default_factory=list)
    total_pages: int = 1
    current_page: int = 1
    total_messages: int = 0
    has_more: bool = False


class SessionSummary(BaseModel):
    """Summary of a session for list views."""

    id: str
    project_id: str
    file_path: str = ""
    last_modified: datetime | None = None
    message_count: int = 0
    summary: str = ""
    stats: SessionStats | None = None


class SessionDetail(SessionSummary):
    """Session summary plus one page of its messages."""

    pagination: PaginatedMessages = Field(default_factory=PaginatedMessages)
