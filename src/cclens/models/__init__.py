"""Pydantic models for cclens."""

from cclens.models.entries import (
    RAW_ENTRY_ADAPTER,
    RawAssistantEntry,
    RawEntry,
    RawMessage,
    RawProgressEntry,
    RawSummaryEntry,
    RawUsage,
    RawUserEntry,
)
from cclens.models.messages import (
    AgentProgress,
    ContentBlock,
    HookBlock,
    ImageBlock,
    Message,
    MessageType,
    ProgressBlock,
    TextBlock,
    ThinkingBlock,
    TokenUsage,
    ToolResultBlock,
    ToolUseBlock,
)
from cclens.models.projects import ProjectStats, ProjectSummary
from cclens.models.sessions import (
    PaginatedMessages,
    ParsedSession,
    SessionDetail,
    SessionStats,
    SessionSummary,
)

__all__ = [
    "AgentProgress",
    "ContentBlock",
    "HookBlock",
    "ImageBlock",
    "Message",
    "MessageType",
    "PaginatedMessages",
    "ParsedSession",
    "ProgressBlock",
    "ProjectStats",
    "ProjectSummary",
    "RawAssistantEntry",
    "RawEntry",
    "RawMessage",
    "RawProgressEntry",
    "RawSummaryEntry",
    "RawUsage",
    "RawUserEntry",
    "SessionDetail",
    "SessionStats",
    "SessionSummary",
    "TextBlock",
    "ThinkingBlock",
    "TokenUsage",
    "ToolResultBlock",
    "ToolUseBlock",
    "RAW_ENTRY_ADAPTER",
]
