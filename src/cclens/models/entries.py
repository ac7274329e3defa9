"""Raw log entry models, one per decoded JSONL line."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter


class _RawModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


def _zero_if_null(value: object) -> object:
    return 0 if value is None else value


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None


def _true_only(value: object) -> bool:
    return value is True


def _number_or_none(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return value


# Optional fields vary in type across CLI versions; a bad value falls back to
# the default instead of rejecting the line.
TokenCount = Annotated[int, BeforeValidator(_zero_if_null), Field(ge=0)]
OptionalStr = Annotated[str | None, BeforeValidator(_str_or_none)]
OptionalNumber = Annotated[float | None, BeforeValidator(_number_or_none)]
Flag = Annotated[bool, BeforeValidator(_true_only)]


class RawUsage(_RawModel):
    """Token counters as written by the CLI."""

    input_tokens: TokenCount = 0
    output_tokens: TokenCount = 0
    cache_creation_input_tokens: TokenCount = 0
    cache_read_input_tokens: TokenCount = 0


class RawMessage(_RawModel):
    """The nested message record of a user/assistant entry."""

    role: str
    content: str | list[Any]
    model: OptionalStr = None
    usage: RawUsage | None = None


class _RawConversationEntry(_RawModel):
    uuid: str
    timestamp: str
    message: RawMessage
    parent_uuid: OptionalStr = Field(default=None, alias="parentUuid")
    is_sidechain: Flag = Field(default=False, alias="isSidechain")
    # Older log formats recorded cost inline on the entry.
    cost_usd: OptionalNumber = Field(default=None, alias="costUsd")


class RawUserEntry(_RawConversationEntry):
    type: Literal["user"]
    tool_use_result: Any = Field(default=None, alias="toolUseResult")


class RawAssistantEntry(_RawConversationEntry):
    type: Literal["assistant"]


class RawSummaryEntry(_RawModel):
    type: Literal["summary"]
    summary: str
    leaf_uuid: OptionalStr = Field(default=None, alias="leafUuid")


class RawProgressEntry(_RawModel):
    """Sub-agent or hook progress update.

    The correlation fields are spelled inconsistently across CLI versions;
    ``cclens.data.correlation`` is the only place that should read them.
    """

    type: Literal["progress"]
    uuid: str
    timestamp: str
    data: dict[str, Any]
    parent_tool_use_id: OptionalStr = Field(default=None, alias="parentToolUseID")
    tool_use_id: OptionalStr = Field(default=None, alias="toolUseID")
    agent_id: OptionalStr = Field(default=None, alias="agentId")

    @property
    def is_hook(self) -> bool:
        return self.data.get("type") == "hook_progress"


type RawConversationEntry = RawUserEntry | RawAssistantEntry

RawEntry = Annotated[
    RawUserEntry | RawAssistantEntry | RawSummaryEntry | RawProgressEntry,
    Field(discriminator="type"),
]

RAW_ENTRY_ADAPTER: TypeAdapter[RawEntry] = TypeAdapter(RawEntry)
