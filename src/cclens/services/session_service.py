"""Session service — reads session logs and runs them through the parser."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from result import Err, Ok, Result

from cclens.data.correlation import recover_agent_id
from cclens.data.discovery import (
    DiscoveredSession,
    TranscriptFile,
    discover_projects,
    discover_sessions,
    find_agent_log,
    project_dir,
    read_transcript,
    session_path,
)
from cclens.data.parser import parse_transcript
from cclens.models.projects import ProjectStats, ProjectSummary
from cclens.models.sessions import (
    PaginatedMessages,
    ParsedSession,
    SessionDetail,
    SessionSummary,
)
from cclens.services.analytics import SessionRecord, aggregate_project_stats
from cclens.services.cost import DEFAULT_PRICING_TABLE
from cclens.services.pagination import paginate_messages

if TYPE_CHECKING:
    from pathlib import Path

    from cclens.config import Config
    from cclens.services.protocols import PricingLookup

logger = logging.getLogger(__name__)


class SessionService:
    """Service for session queries backed by the log files on disk."""

    def __init__(self, config: Config, pricing: PricingLookup = DEFAULT_PRICING_TABLE) -> None:
        self._config = config
        self._pricing = pricing

    async def list_projects(self) -> Result[list[ProjectSummary], str]:
        """List projects with at least one session, most recently active first."""
        projects = await asyncio.to_thread(discover_projects, self._config)
        return Ok(
            [
                ProjectSummary(
                    project_id=p.project_id,
                    project_path=p.project_path,
                    display_name=p.display_name,
                    session_count=p.session_count,
                    last_modified=p.last_modified,
                )
                for p in projects
            ]
        )

    async def list_sessions(self, project_id: str) -> Result[list[SessionSummary], str]:
        """Parse every session of a project, newest first.

        Sessions that fail to read are logged and left out.
        """
        records = await self._parse_project(project_id)
        if records is None:
            return Err(f"Project {project_id} not found")
        return Ok(
            [
                _summary(project_id, session, transcript, parsed)
                for session, transcript, parsed in records
            ]
        )

    async def search_sessions(self, query: str) -> Result[list[SessionSummary], str]:
        """Sessions whose summary or project name contains ``query``, newest first.

        Matching is case-insensitive.
        """
        needle = query.lower()
        projects = await asyncio.to_thread(discover_projects, self._config)

        matches: list[SessionSummary] = []
        for project in projects:
            project_matches = needle in project.display_name.lower()
            records = await self._parse_project(project.project_id)
            for session, transcript, parsed in records or []:
                if project_matches or needle in parsed.summary.lower():
                    matches.append(_summary(project.project_id, session, transcript, parsed))

        matches.sort(
            key=lambda s: s.last_modified or datetime.min.replace(tzinfo=UTC), reverse=True
        )
        return Ok(matches)

    async def delete_session(self, project_id: str, session_id: str) -> Result[bool, str]:
        """Delete a session log from disk. Sub-agent logs are left in place."""
        path = session_path(self._config, project_id, session_id)
        if path is None:
            return Err(f"Session {session_id} not found")
        try:
            await asyncio.to_thread(path.unlink)
        except OSError as exc:
            logger.warning("Failed to delete %s: %s", path, exc)
            return Err(f"Failed to delete session: {exc}")
        logger.info("Deleted session %s", path)
        return Ok(True)

    async def get_session_detail(
        self,
        project_id: str,
        session_id: str,
        *,
        page: int = 1,
    ) -> Result[SessionDetail, str]:
        """Get session summary and stats with one page of messages.

        Returns:
            Ok with SessionDetail or Err if the log is missing or unreadable.
        """
        path = session_path(self._config, project_id, session_id)
        if path is None:
            return Err(f"Session {session_id} not found")

        loaded = await self._load(path, self._config.page_size)
        if isinstance(loaded, Err):
            return loaded
        transcript, parsed = loaded.ok_value

        summary = _summary_fields(project_id, session_id, path, transcript, parsed)
        return Ok(
            SessionDetail(
                **summary,
                pagination=paginate_messages(parsed.messages, page, self._config.page_size),
            )
        )

    async def get_agent_transcript(
        self,
        project_id: str,
        session_id: str,
        agent_id: str,
        *,
        page: int = 1,
    ) -> Result[PaginatedMessages, str]:
        """Parse a sub-agent's own log and return one page of it."""
        path = find_agent_log(self._config, project_id, session_id, agent_id)
        if path is None:
            return Err(f"Agent log {agent_id} not found for session {session_id}")

        page_size = self._config.agent_page_size
        loaded = await self._load(path, page_size)
        if isinstance(loaded, Err):
            return loaded
        _, parsed = loaded.ok_value
        return Ok(paginate_messages(parsed.messages, page, page_size))

    async def get_project_stats(self, project_id: str) -> Result[ProjectStats, str]:
        """Aggregate cost, time and activity over all sessions of a project."""
        records = await self._parse_project(project_id)
        if records is None:
            return Err(f"Project {project_id} not found")
        return Ok(
            aggregate_project_stats(
                [
                    SessionRecord(parsed=parsed, last_modified=transcript.last_modified)
                    for _, transcript, parsed in records
                ]
            )
        )

    def parse(self, text: str, page_size: int | None = None) -> ParsedSession:
        """Run the parser with this service's configuration."""
        return parse_transcript(
            text,
            page_size=page_size or self._config.page_size,
            pricing=self._pricing,
            agent_id_recovery=recover_agent_id if self._config.recover_agent_ids else None,
            summary_max_length=self._config.summary_max_length,
        )

    async def _parse_project(
        self, project_id: str
    ) -> list[tuple[DiscoveredSession, TranscriptFile, ParsedSession]] | None:
        if project_dir(self._config, project_id) is None:
            return None
        sessions = await asyncio.to_thread(discover_sessions, self._config, project_id)

        # Parses are independent; bound how many run at once for this request.
        limiter = asyncio.Semaphore(max(self._config.max_workers, 1))

        async def load(
            session: DiscoveredSession,
        ) -> Result[tuple[TranscriptFile, ParsedSession], str]:
            async with limiter:
                return await self._load(session.file_path, self._config.page_size)

        results = await asyncio.gather(*(load(s) for s in sessions))

        records: list[tuple[DiscoveredSession, TranscriptFile, ParsedSession]] = []
        for session, result in zip(sessions, results, strict=True):
            if isinstance(result, Err):
                logger.warning("Skipping session %s: %s", session.session_id, result.err_value)
                continue
            transcript, parsed = result.ok_value
            records.append((session, transcript, parsed))
        return records

    async def _load(
        self, path: Path, page_size: int
    ) -> Result[tuple[TranscriptFile, ParsedSession], str]:
        try:
            return Ok(await asyncio.to_thread(self._read_and_parse, path, page_size))
        except OSError as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            return Err(f"Failed to read {path.name}: {exc}")

    def _read_and_parse(self, path: Path, page_size: int) -> tuple[TranscriptFile, ParsedSession]:
        transcript = read_transcript(path)
        return transcript, self.parse(transcript.raw_text, page_size)


def _summary_fields(
    project_id: str,
    session_id: str,
    path: Path,
    transcript: TranscriptFile,
    parsed: ParsedSession,
) -> dict[str, object]:
    return {
        "id": session_id,
        "project_id": project_id,
        "file_path": str(path),
        "last_modified": transcript.last_modified,
        "message_count": parsed.stats.message_count,
        "summary": parsed.summary,
        "stats": parsed.stats,
    }


def _summary(
    project_id: str,
    session: DiscoveredSession,
    transcript: TranscriptFile,
    parsed: ParsedSession,
) -> SessionSummary:
    return SessionSummary(
        **_summary_fields(project_id, session.session_id, session.file_path, transcript, parsed)
    )
