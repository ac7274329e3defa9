"""Project-level models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ProjectSummary(BaseModel):
    """Summary of a project for list views."""

    project_id: str
    project_path: str = ""
    display_name: str = ""
    session_count: int = 0
    last_modified: datetime | None = None


class ProjectStats(BaseModel):
    """Efficiency statistics aggregated over every session of a project."""

    total_cost: float = 0.0
    lines_written: int = 0
    time_spent_ms: int = 0
    session_count: int = 0
    total_messages: int = 0
    total_tool_calls: int = 0
    first_session: datetime | None = None
    last_session: datetime | None = None
