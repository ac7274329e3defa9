"""Map raw message content onto canonical content blocks."""

from __future__ import annotations

import json
from typing import Any

from cclens.models.messages import (
    ContentBlock,
    ImageBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)


def normalize_content(raw_content: object) -> list[ContentBlock]:
    """Normalize a message's ``content`` field into a list of blocks.

    A plain string becomes a single text block. Blocks with an unknown tag are
    kept as text holding their JSON form.
    """
    if isinstance(raw_content, str):
        return [TextBlock(text=raw_content)]
    if not isinstance(raw_content, list):
        return []

    blocks: list[ContentBlock] = []
    for block in raw_content:
        if isinstance(block, str):
            blocks.append(TextBlock(text=block))
        elif isinstance(block, dict):
            blocks.append(_normalize_block(block))
        else:
            blocks.append(TextBlock(text=json.dumps(block)))
    return blocks


def _normalize_block(block: dict[str, Any]) -> ContentBlock:
    match block.get("type"):
        case "text":
            return TextBlock(text=_as_str(block.get("text")))
        case "tool_use":
            return ToolUseBlock(
                id=_as_str(block.get("id")),
                name=_as_str(block.get("name")),
                input=_as_dict(block.get("input")),
            )
        case "tool_result":
            return ToolResultBlock(
                tool_use_id=_as_str(block.get("tool_use_id")),
                content=block.get("content"),
                is_error=block.get("is_error") is True,
            )
        case "thinking":
            return ThinkingBlock(thinking=_as_str(block.get("thinking")))
        case "image":
            return ImageBlock(source=block.get("source"))
        case _:
            return TextBlock(text=json.dumps(block, ensure_ascii=False))


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
