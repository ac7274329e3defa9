"""Message-level models produced by the transcript parser."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class TokenUsage(_FrozenModel):
    """Token usage and calculated cost for a single API call."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cache_creation_tokens: int = Field(default=0, ge=0)
    cache_read_tokens: int = Field(default=0, ge=0)
    cost_usd: float = Field(default=0.0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tokens(self) -> int:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_creation_tokens
            + self.cache_read_tokens
        )


class AgentProgress(_FrozenModel):
    """A sub-agent progress record linked to the tool call that spawned it."""

    uuid: str
    timestamp: str
    type: str = ""
    prompt: str = ""
    agent_id: str | None = None
    tool_use_id: str | None = None
    parent_tool_use_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class TextBlock(_FrozenModel):
    type: Literal["text"] = "text"
    text: str = ""


class ToolUseBlock(_FrozenModel):
    """A tool invocation, enriched with its result and sub-agent activity."""

    type: Literal["tool_use"] = "tool_use"
    id: str = ""
    name: str = ""
    input: dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    progress: list[AgentProgress] = Field(default_factory=list)
    agent_id: str | None = None


class ToolResultBlock(_FrozenModel):
    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = ""
    content: Any = None
    is_error: bool = False


class ThinkingBlock(_FrozenModel):
    type: Literal["thinking"] = "thinking"
    thinking: str = ""


class ImageBlock(_FrozenModel):
    type: Literal["image"] = "image"
    source: Any = None


class ProgressBlock(_FrozenModel):
    """Sub-agent activity not linked to a visible tool call."""

    type: Literal["progress"] = "progress"
    text: str = ""
    agent_id: str | None = None
    tool_use_id: str | None = None
    timestamp: str = ""


class HookBlock(_FrozenModel):
    type: Literal["hook"] = "hook"
    hook_event: str = ""
    hook_name: str = ""
    command: str = ""


ContentBlock = Annotated[
    TextBlock
    | ToolUseBlock
    | ToolResultBlock
    | ThinkingBlock
    | ImageBlock
    | ProgressBlock
    | HookBlock,
    Field(discriminator="type"),
]

MessageType = Literal["user", "assistant", "progress", "hook"]


class Message(_FrozenModel):
    """A parsed conversation message."""

    uuid: str
    type: MessageType
    role: str
    timestamp: str = ""
    content: list[ContentBlock] = Field(default_factory=list)
    model: str | None = None
    usage: TokenUsage | None = None
