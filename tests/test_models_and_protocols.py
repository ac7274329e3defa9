"""Tests for model constraints and service protocols."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cclens.config import Config
from cclens.models import Message, TextBlock, TokenUsage, ToolUseBlock
from cclens.services.cost import DEFAULT_PRICING_TABLE
from cclens.services.protocols import PricingLookup, SessionServiceProtocol
from cclens.services.session_service import SessionService


def test_messages_are_frozen() -> None:
    message = Message(uuid="m", type="user", role="user", content=[TextBlock(text="hi")])
    with pytest.raises(ValidationError):
        message.uuid = "other"  # type: ignore[misc]


def test_token_usage_rejects_negative_values() -> None:
    with pytest.raises(ValidationError):
        TokenUsage(input_tokens=-1)


def test_content_blocks_validate_by_tag() -> None:
    message = Message.model_validate(
        {
            "uuid": "m",
            "type": "assistant",
            "role": "assistant",
            "content": [{"type": "tool_use", "id": "t1", "name": "Read"}],
        }
    )
    assert isinstance(message.content[0], ToolUseBlock)


def test_message_type_is_restricted() -> None:
    with pytest.raises(ValidationError):
        Message(uuid="m", type="summary", role="user")  # type: ignore[arg-type]


def test_implementations_satisfy_protocols() -> None:
    pricing: PricingLookup = DEFAULT_PRICING_TABLE
    service: SessionServiceProtocol = SessionService(Config(), pricing=pricing)
    assert callable(service.list_projects)
    assert callable(pricing.resolve)
