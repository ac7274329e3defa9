"""Shared fixtures for cclens tests."""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from cclens.config import Config

SAMPLE_SESSION_PATH = Path(__file__).parent / "data" / "sample_session.jsonl"
AGENT_SESSION_PATH = Path(__file__).parent / "data" / "agent_session.jsonl"

PROJECT_ID = "-tmp-test-project"
SESSION_ID = "test-session-001"
AGENT_ID = "a1b2c3"


@pytest.fixture
def sample_session_path() -> Path:
    """Path to the sample session JSONL file."""
    return SAMPLE_SESSION_PATH


@pytest.fixture
def sample_session_text() -> str:
    return SAMPLE_SESSION_PATH.read_text(encoding="utf-8")


@pytest.fixture
def jsonl() -> Callable[..., str]:
    """Serialize records into JSONL text, one record per line."""

    def _jsonl(*records: dict[str, Any]) -> str:
        return "\n".join(json.dumps(record) for record in records) + "\n"

    return _jsonl


@pytest.fixture
def tmp_claude_dir(tmp_path: Path) -> Path:
    """Create a temporary Claude directory with sample data."""
    claude_dir = tmp_path / ".claude"
    project_dir = claude_dir / "projects" / PROJECT_ID
    project_dir.mkdir(parents=True)

    shutil.copy(SAMPLE_SESSION_PATH, project_dir / f"{SESSION_ID}.jsonl")

    # Sub-agent log in the newer nested layout
    subagents_dir = project_dir / SESSION_ID / "subagents"
    subagents_dir.mkdir(parents=True)
    shutil.copy(AGENT_SESSION_PATH, subagents_dir / f"agent-{AGENT_ID}.jsonl")

    return claude_dir


@pytest.fixture
def test_config(tmp_claude_dir: Path) -> Config:
    """Config pointing at temporary test data."""
    return Config(claude_dir=tmp_claude_dir)
