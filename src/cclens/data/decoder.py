"""Decode raw JSONL session text into typed log entries."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from cclens.models.entries import RAW_ENTRY_ADAPTER, RawEntry

logger = logging.getLogger(__name__)

_ENTRY_TYPES = frozenset({"user", "assistant", "summary", "progress"})


def decode_lines(text: str) -> list[RawEntry]:
    """Parse each non-blank line of ``text`` into a ``RawEntry``.

    Lines that are not JSON objects, carry another entry type, or lack the
    fields their type requires are skipped. File order is preserved.
    """
    entries: list[RawEntry] = []
    for line_num, line in enumerate(text.split("\n"), 1):
        line = line.strip()
        if not line:
            continue
        entry = _decode_line(line, line_num)
        if entry is not None:
            entries.append(entry)
    return entries


def _decode_line(line: str, line_num: int) -> RawEntry | None:
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("Invalid JSON at line %d", line_num)
        return None

    if not isinstance(raw, dict):
        return None
    msg_type = raw.get("type")
    if not isinstance(msg_type, str) or msg_type not in _ENTRY_TYPES:
        return None

    try:
        return RAW_ENTRY_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        logger.debug(
            "Skipping %s entry at line %d: %d validation error(s)",
            msg_type,
            line_num,
            exc.error_count(),
        )
        return None
