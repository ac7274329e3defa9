"""Discover Claude projects, session logs and sub-agent logs on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from cclens.config import Config
from cclens.data.correlation import canonical_agent_id

logger = logging.getLogger(__name__)

_AGENT_LOG_PREFIX = "agent-"
_SUBAGENTS_DIR = "subagents"


@dataclass(frozen=True)
class TranscriptFile:
    """Raw text of one log file and when it was last written."""

    raw_text: str
    last_modified: datetime


@dataclass
class DiscoveredSession:
    """A discovered session file with basic metadata."""

    session_id: str
    project_id: str
    file_path: Path
    last_modified: datetime
    file_size: int


@dataclass
class DiscoveredProject:
    """A discovered project directory."""

    project_id: str
    project_path: str
    display_name: str
    dir_path: Path
    session_count: int = 0
    last_modified: datetime | None = None


def decode_project_path(project_id: str) -> str:
    """Decode a Claude project ID '-Users-foo-src-myproject' -> '/Users/foo/src/myproject'."""
    if not project_id:
        return ""
    return project_id.replace("-", "/")


def project_display_name(project_path: str) -> str:
    """Last two path parts, e.g. 'src/myproject'."""
    parts = [part for part in project_path.split("/") if part]
    if not parts:
        return "Unknown Project"
    return "/".join(parts[-2:])


def project_dir(config: Config, project_id: str) -> Path | None:
    """Directory of a project, or None if the id is invalid or missing."""
    if not _is_plain_name(project_id):
        return None
    path = config.projects_dir / project_id
    return path if path.is_dir() else None


def discover_projects(config: Config) -> list[DiscoveredProject]:
    """Discover projects that hold at least one non-empty session log."""
    projects_dir = config.projects_dir
    if not projects_dir.is_dir():
        logger.info("Claude projects directory not found: %s", projects_dir)
        return []

    projects: list[DiscoveredProject] = []
    for entry in sorted(projects_dir.iterdir()):
        if not entry.is_dir():
            continue
        sessions = _sessions_in(entry)
        if not sessions:
            continue
        project_path = decode_project_path(entry.name)
        projects.append(
            DiscoveredProject(
                project_id=entry.name,
                project_path=project_path,
                display_name=project_display_name(project_path),
                dir_path=entry,
                session_count=len(sessions),
                last_modified=max(s.last_modified for s in sessions),
            )
        )

    projects.sort(key=lambda p: p.last_modified or datetime.min.replace(tzinfo=UTC), reverse=True)
    return projects


def discover_sessions(config: Config, project_id: str) -> list[DiscoveredSession]:
    """Discover session logs of one project, newest first.

    Empty files and sub-agent logs are skipped.
    """
    directory = project_dir(config, project_id)
    if directory is None:
        logger.info("Project directory not found: %s", project_id)
        return []
    sessions = _sessions_in(directory)
    sessions.sort(key=lambda s: s.last_modified, reverse=True)
    return sessions


def session_path(config: Config, project_id: str, session_id: str) -> Path | None:
    directory = project_dir(config, project_id)
    if directory is None or not _is_plain_name(session_id):
        return None
    path = directory / f"{session_id}.jsonl"
    return path if path.is_file() else None


def find_agent_log(
    config: Config,
    project_id: str,
    session_id: str,
    agent_id: str,
) -> Path | None:
    """Locate the log written by a sub-agent of a session.

    Newer CLI versions write ``<session>/subagents/agent-<id>.jsonl``; older
    ones put ``agent-<id>.jsonl`` next to the session log.
    """
    directory = project_dir(config, project_id)
    if directory is None or not _is_plain_name(session_id) or not _is_plain_name(agent_id):
        return None

    filename = f"{canonical_agent_id(agent_id)}.jsonl"
    for candidate in (directory / session_id / _SUBAGENTS_DIR / filename, directory / filename):
        if candidate.is_file():
            return candidate
    return None


def read_transcript(path: Path) -> TranscriptFile:
    """Read a log file. Raises OSError if it cannot be read."""
    stat = path.stat()
    return TranscriptFile(
        raw_text=path.read_text(encoding="utf-8", errors="replace"),
        last_modified=_mtime(stat.st_mtime),
    )


def _sessions_in(directory: Path) -> list[DiscoveredSession]:
    sessions: list[DiscoveredSession] = []
    for jsonl_path in sorted(directory.glob("*.jsonl")):
        if jsonl_path.name.startswith(_AGENT_LOG_PREFIX):
            continue
        try:
            stat = jsonl_path.stat()
        except OSError:
            logger.warning("Failed to stat session file %s", jsonl_path)
            continue
        if stat.st_size == 0:
            continue
        sessions.append(
            DiscoveredSession(
                session_id=jsonl_path.stem,
                project_id=directory.name,
                file_path=jsonl_path,
                last_modified=_mtime(stat.st_mtime),
                file_size=stat.st_size,
            )
        )
    return sessions


def _mtime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=UTC)


def _is_plain_name(name: str) -> bool:
    return bool(name) and name not in {".", ".."} and "/" not in name and "\\" not in name
