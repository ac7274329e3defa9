"""Configuration for cclens."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    claude_dir: Path = field(default_factory=lambda: Path.home() / ".claude")
    page_size: int = 20
    agent_page_size: int = 5
    summary_max_length: int = 100
    max_workers: int = 8
    recover_agent_ids: bool = True

    @property
    def projects_dir(self) -> Path:
        return self.claude_dir / "projects"
