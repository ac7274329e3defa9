"""Full-parse entry point: raw session text to messages, stats and summary."""

from __future__ import annotations

import heapq
import logging
from operator import itemgetter
from typing import TYPE_CHECKING

from cclens.data.aggregator import (
    DEFAULT_SUMMARY_LENGTH,
    SessionAccumulator,
    resolve_summary,
)
from cclens.data.correlation import (
    AgentIdRecovery,
    ToolUseLinker,
    progress_agent_id,
    progress_tool_use_id,
    recover_agent_id,
)
from cclens.data.decoder import decode_lines
from cclens.data.normalizer import normalize_content
from cclens.models.entries import (
    RawAssistantEntry,
    RawProgressEntry,
    RawSummaryEntry,
    RawUserEntry,
)
from cclens.models.messages import (
    HookBlock,
    Message,
    ProgressBlock,
    TokenUsage,
    ToolResultBlock,
    ToolUseBlock,
)
from cclens.models.sessions import ParsedSession
from cclens.services.cost import DEFAULT_PRICING_TABLE, calculate_cost

if TYPE_CHECKING:
    from cclens.models.entries import RawConversationEntry, RawMessage
    from cclens.services.protocols import PricingLookup

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def parse_transcript(
    text: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    pricing: PricingLookup = DEFAULT_PRICING_TABLE,
    agent_id_recovery: AgentIdRecovery | None = recover_agent_id,
    summary_max_length: int = DEFAULT_SUMMARY_LENGTH,
) -> ParsedSession:
    """Parse one session log into messages, stats and a summary.

    Args:
        text: Full JSONL text of the session file.
        page_size: Page size used for ``stats.total_pages``.
        pricing: Rate lookup used to cost each message's token usage.
        agent_id_recovery: Fallback used to find sub-agent ids in tool output
            when no structured id was logged; ``None`` disables it.
        summary_max_length: Truncation length for the first-prompt summary.

    Malformed lines and unresolved references are skipped, never raised.
    """
    entries = decode_lines(text)
    accumulator = SessionAccumulator()
    linker = ToolUseLinker(agent_id_recovery)

    # Pass 1: build user/assistant messages and link tool results.
    conversation: list[Message] = []
    positions: list[int] = []
    for position, entry in enumerate(entries):
        match entry:
            case RawSummaryEntry():
                accumulator.observe_summary(entry.summary)
            case RawUserEntry() | RawAssistantEntry():
                message = _build_message(entry, pricing)
                for block_index, block in enumerate(message.content):
                    if isinstance(block, ToolUseBlock) and block.id:
                        linker.register(block, len(conversation), block_index)
                    elif isinstance(block, ToolResultBlock) and block.tool_use_id:
                        linker.attach_result(block, entry)
                accumulator.observe(entry, message)
                conversation.append(message)
                positions.append(position)

    # Pass 2: link progress to tool calls; keep the rest standalone.
    standalone: list[tuple[int, Message]] = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, RawProgressEntry):
            continue
        if entry.is_hook:
            standalone.append((position, _hook_message(entry)))
        elif not linker.attach_progress(entry):
            standalone.append((position, _progress_message(entry)))

    linked = zip(positions, linker.apply(conversation), strict=True)
    messages = [message for _, message in heapq.merge(linked, standalone, key=itemgetter(0))]

    logger.debug(
        "Parsed %d entries into %d messages (%d standalone progress/hook)",
        len(entries),
        len(messages),
        len(standalone),
    )
    return ParsedSession(
        messages=messages,
        stats=accumulator.build_stats(page_size),
        summary=resolve_summary(accumulator.summary, messages, summary_max_length),
    )


def _build_message(entry: RawConversationEntry, pricing: PricingLookup) -> Message:
    msg = entry.message
    return Message(
        uuid=entry.uuid,
        type=entry.type,
        role=entry.type,
        timestamp=entry.timestamp,
        content=normalize_content(msg.content),
        model=msg.model,
        usage=_token_usage(msg, pricing),
    )


def _token_usage(msg: RawMessage, pricing: PricingLookup) -> TokenUsage | None:
    if msg.usage is None:
        return None
    usage = msg.usage
    return TokenUsage(
        input_tokens=usage.input_tokens,
        output_tokens=usage.output_tokens,
        cache_creation_tokens=usage.cache_creation_input_tokens,
        cache_read_tokens=usage.cache_read_input_tokens,
        cost_usd=calculate_cost(
            pricing.resolve(msg.model),
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            cache_creation_tokens=usage.cache_creation_input_tokens,
            cache_read_tokens=usage.cache_read_input_tokens,
        ),
    )


def _progress_message(entry: RawProgressEntry) -> Message:
    prompt = entry.data.get("prompt")
    return Message(
        uuid=entry.uuid,
        type="progress",
        role="assistant",
        timestamp=entry.timestamp,
        content=[
            ProgressBlock(
                text=prompt if isinstance(prompt, str) else "",
                agent_id=progress_agent_id(entry),
                tool_use_id=progress_tool_use_id(entry),
                timestamp=entry.timestamp,
            )
        ],
    )


def _hook_message(entry: RawProgressEntry) -> Message:
    data = entry.data
    hook_event = _as_str(data.get("hookEvent"))
    return Message(
        uuid=entry.uuid,
        type="hook",
        role="assistant",
        timestamp=entry.timestamp,
        content=[
            HookBlock(
                hook_event=hook_event,
                hook_name=_as_str(data.get("hookName")) or hook_event,
                command=_as_str(data.get("command")),
            )
        ],
    )


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""
