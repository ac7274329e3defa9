"""Protocol definitions for services."""

from __future__ import annotations

from typing import Protocol

from result import Result

from cclens.models.projects import ProjectStats, ProjectSummary
from cclens.models.sessions import PaginatedMessages, SessionDetail, SessionSummary
from cclens.services.cost import ModelPricing


class PricingLookup(Protocol):
    """Resolves per-model token rates."""

    def resolve(self, model_id: str | None) -> ModelPricing: ...


class SessionServiceProtocol(Protocol):
    """Interface for session operations."""

    async def list_projects(self) -> Result[list[ProjectSummary], str]: ...

    async def list_sessions(self, project_id: str) -> Result[list[SessionSummary], str]: ...

    async def search_sessions(self, query: str) -> Result[list[SessionSummary], str]: ...

    async def delete_session(self, project_id: str, session_id: str) -> Result[bool, str]: ...

    async def get_session_detail(
        self,
        project_id: str,
        session_id: str,
        *,
        page: int = 1,
    ) -> Result[SessionDetail, str]: ...

    async def get_agent_transcript(
        self,
        project_id: str,
        session_id: str,
        agent_id: str,
        *,
        page: int = 1,
    ) -> Result[PaginatedMessages, str]: ...

    async def get_project_stats(self, project_id: str) -> Result[ProjectStats, str]: ...
