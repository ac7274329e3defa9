"""Link tool results and sub-agent progress back to their tool calls.

The raw log spells its correlation fields several ways depending on the CLI
version. The ``*_id`` adapter functions below are the only code that knows
those spellings; ``ToolUseLinker`` works purely in terms of canonical ids.

Linking never mutates a built ``Message``. The linker keeps an id -> block
position table plus an overlay of pending updates, and ``apply`` produces
new frozen messages with the overlay merged in.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from cclens.models.entries import RawConversationEntry, RawProgressEntry
from cclens.models.messages import AgentProgress, Message, ToolResultBlock, ToolUseBlock

AGENT_ID_PREFIX = "agent-"

_AGENT_ID_PATTERNS = (
    re.compile(r"agent-([a-f0-9]+)", re.IGNORECASE),
    re.compile(r"Agent ID[:\s]+([a-f0-9]+)", re.IGNORECASE),
    re.compile(r"agentId[:\s]+([a-f0-9]+)", re.IGNORECASE),
)

type AgentIdRecovery = Callable[[str], str | None]


def canonical_agent_id(raw: str) -> str:
    """Ensure a sub-agent id carries the ``agent-`` prefix."""
    return raw if raw.startswith(AGENT_ID_PREFIX) else f"{AGENT_ID_PREFIX}{raw}"


def recover_agent_id(text: str) -> str | None:
    """Best-effort sub-agent id recovery from free-form tool output.

    Older logs never recorded the id in a structured field, so the first
    ``agent-<hex>``, ``Agent ID: <hex>`` or ``agentId: <hex>`` occurrence is
    taken instead. Pass ``agent_id_recovery=None`` to the parser to disable it.
    """
    for pattern in _AGENT_ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return canonical_agent_id(match.group(1))
    return None


def parent_tool_use_id(entry: RawProgressEntry) -> str | None:
    """The tool call a progress entry belongs to, in priority order."""
    return _first_str(
        entry.parent_tool_use_id,
        entry.data.get("parentToolUseID"),
        entry.data.get("toolUseId"),
    )


def progress_tool_use_id(entry: RawProgressEntry) -> str | None:
    return _first_str(entry.data.get("toolUseID"), entry.data.get("toolUseId"))


def progress_agent_id(entry: RawProgressEntry) -> str | None:
    return _first_str(
        entry.data.get("agentId"),
        entry.agent_id,
        entry.data.get("agentID"),
        entry.data.get("agent_id"),
    )


def structured_result_agent_id(entry: RawConversationEntry) -> str | None:
    """Sub-agent id recorded in the entry's ``toolUseResult`` metadata."""
    metadata = getattr(entry, "tool_use_result", None)
    if isinstance(metadata, dict):
        return _first_str(metadata.get("agentId"))
    return None


def task_input_agent_id(block: ToolUseBlock) -> str | None:
    """Some CLI versions echo the sub-agent id into the Task tool input."""
    if block.name != "Task":
        return None
    return _first_str(block.input.get("agentId"))


def result_search_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    return json.dumps(content, ensure_ascii=False, default=str)


@dataclass(frozen=True, slots=True)
class BlockRef:
    """Position of a tool_use block within the pass-1 message list."""

    message_index: int
    block_index: int


@dataclass
class ToolUseOverlay:
    """Updates collected for one tool_use block before the final merge."""

    result: Any = None
    has_result: bool = False
    agent_id: str | None = None
    progress: list[AgentProgress] = field(default_factory=list)

    def updates(self, block: ToolUseBlock) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        if self.has_result:
            changes["result"] = self.result
        if self.agent_id:
            changes["agent_id"] = self.agent_id
        if self.progress:
            changes["progress"] = [*block.progress, *self.progress]
        return changes


class ToolUseLinker:
    """Correlates tool results and progress records with tool_use blocks."""

    def __init__(self, agent_id_recovery: AgentIdRecovery | None = recover_agent_id) -> None:
        self._recover = agent_id_recovery
        self._refs: dict[str, BlockRef] = {}
        self._overlays: dict[BlockRef, ToolUseOverlay] = {}

    def __contains__(self, tool_use_id: str) -> bool:
        return tool_use_id in self._refs

    def register(self, block: ToolUseBlock, message_index: int, block_index: int) -> None:
        """Record a tool_use block; a later block with the same id replaces it."""
        ref = BlockRef(message_index, block_index)
        self._refs[block.id] = ref
        seeded = task_input_agent_id(block)
        if seeded:
            self._overlay(ref).agent_id = canonical_agent_id(seeded)

    def attach_result(self, block: ToolResultBlock, entry: RawConversationEntry) -> bool:
        """Attach a tool_result to the tool_use it references.

        Returns False when the reference is unknown; the result is then dropped.
        """
        ref = self._refs.get(block.tool_use_id)
        if ref is None:
            return False

        overlay = self._overlay(ref)
        overlay.result = block.content
        overlay.has_result = True

        structured = structured_result_agent_id(entry)
        if structured:
            overlay.agent_id = canonical_agent_id(structured)
        if not overlay.agent_id and self._recover is not None:
            overlay.agent_id = self._recover(result_search_text(block.content))
        return True

    def attach_progress(self, entry: RawProgressEntry) -> bool:
        """Append a progress record to its parent tool_use.

        Returns False when the entry's parent id does not resolve.
        """
        parent_id = parent_tool_use_id(entry)
        ref = self._refs.get(parent_id) if parent_id else None
        if ref is None:
            return False

        overlay = self._overlay(ref)
        agent_id = progress_agent_id(entry)
        if agent_id and not overlay.agent_id:
            overlay.agent_id = canonical_agent_id(agent_id)
        overlay.progress.append(
            AgentProgress(
                uuid=entry.uuid,
                timestamp=entry.timestamp,
                type=_first_str(entry.data.get("type")) or "",
                prompt=_first_str(entry.data.get("prompt")) or "",
                agent_id=_first_str(entry.data.get("agentId")),
                tool_use_id=_first_str(entry.data.get("toolUseID"), parent_id),
                parent_tool_use_id=parent_id,
                data=dict(entry.data),
            )
        )
        return True

    def apply(self, messages: Iterable[Message]) -> list[Message]:
        """Merge the overlay into copies of ``messages``."""
        pending: dict[int, list[tuple[int, ToolUseOverlay]]] = {}
        for ref, overlay in self._overlays.items():
            pending.setdefault(ref.message_index, []).append((ref.block_index, overlay))

        merged: list[Message] = []
        for index, message in enumerate(messages):
            updates = pending.get(index)
            if not updates:
                merged.append(message)
                continue
            content = list(message.content)
            for block_index, overlay in updates:
                block = content[block_index]
                if isinstance(block, ToolUseBlock):
                    content[block_index] = block.model_copy(update=overlay.updates(block))
            merged.append(message.model_copy(update={"content": content}))
        return merged

    def _overlay(self, ref: BlockRef) -> ToolUseOverlay:
        overlay = self._overlays.get(ref)
        if overlay is None:
            overlay = self._overlays[ref] = ToolUseOverlay()
        return overlay


def _first_str(*candidates: object) -> str | None:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return None
