"""Newest-first pagination of parsed messages."""

from __future__ import annotations

import math
from collections.abc import Sequence

from cclens.models.messages import Message
from cclens.models.sessions import PaginatedMessages


def paginate_messages(
    messages: Sequence[Message],
    page: int,
    per_page: int = 20,
) -> PaginatedMessages:
    """Return one page of ``messages`` with the newest message first.

    Out-of-range page numbers (including zero and negatives) are clamped into
    ``[1, total_pages]``; an empty list still has one (empty) page.
    """
    per_page = max(per_page, 1)
    newest_first = list(reversed(messages))

    total_messages = len(newest_first)
    total_pages = max(1, math.ceil(total_messages / per_page))
    current_page = max(1, min(page, total_pages))

    start = (current_page - 1) * per_page
    return PaginatedMessages(
        messages=newest_first[start : start + per_page],
        total_pages=total_pages,
        current_page=current_page,
        total_messages=total_messages,
        has_more=current_page < total_pages,
    )
