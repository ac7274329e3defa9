"""Tests for content block normalization."""

from __future__ import annotations

import json

from cclens.data.normalizer import normalize_content
from cclens.models.messages import (
    ImageBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
)


def test_plain_string_becomes_single_text_block() -> None:
    assert normalize_content("hello") == [TextBlock(text="hello")]


def test_empty_string_is_kept() -> None:
    assert normalize_content("") == [TextBlock(text="")]


def test_non_list_content_yields_no_blocks() -> None:
    assert normalize_content(None) == []
    assert normalize_content({"type": "text", "text": "x"}) == []


def test_known_block_tags() -> None:
    blocks = normalize_content(
        [
            {"type": "text", "text": "hi"},
            {"type": "thinking", "thinking": "hmm"},
            {"type": "tool_use", "id": "t1", "name": "Read", "input": {"file_path": "a.py"}},
            {"type": "tool_result", "tool_use_id": "t1", "content": "ok", "is_error": True},
            {"type": "image", "source": {"type": "base64", "data": "AAAA"}},
        ]
    )
    assert blocks == [
        TextBlock(text="hi"),
        ThinkingBlock(thinking="hmm"),
        ToolUseBlock(id="t1", name="Read", input={"file_path": "a.py"}),
        ToolResultBlock(tool_use_id="t1", content="ok", is_error=True),
        ImageBlock(source={"type": "base64", "data": "AAAA"}),
    ]


def test_unknown_tag_kept_as_json_text() -> None:
    raw = {"type": "server_tool_use", "payload": "é"}
    [block] = normalize_content([raw])
    assert isinstance(block, TextBlock)
    assert json.loads(block.text) == raw
    assert "é" in block.text


def test_string_items_become_text_blocks() -> None:
    assert normalize_content(["a", "b"]) == [TextBlock(text="a"), TextBlock(text="b")]


def test_malformed_fields_fall_back_to_defaults() -> None:
    [tool_use, tool_result] = normalize_content(
        [
            {"type": "tool_use", "id": 7, "name": None, "input": "not a dict"},
            {"type": "tool_result", "tool_use_id": "t1", "is_error": "yes"},
        ]
    )
    assert tool_use == ToolUseBlock(id="", name="", input={})
    assert isinstance(tool_result, ToolResultBlock)
    assert tool_result.is_error is False
    assert tool_result.content is None


def test_tool_result_keeps_structured_content() -> None:
    content = [{"type": "text", "text": "Found 3 tests"}]
    [block] = normalize_content([{"type": "tool_result", "tool_use_id": "t1", "content": content}])
    assert isinstance(block, ToolResultBlock)
    assert block.content == content
