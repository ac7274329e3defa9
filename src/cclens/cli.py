"""Typer CLI for cclens — inspect Claude Code session logs."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from result import Err, Result

from cclens.config import Config
from cclens.data.parser import DEFAULT_PAGE_SIZE, parse_transcript
from cclens.services.pagination import paginate_messages
from cclens.services.session_service import SessionService

app = typer.Typer(
    name="cclens",
    help="Inspect Claude Code session logs: messages, sub-agents, tool usage and cost.",
    no_args_is_help=True,
)

ClaudeDirOption = Annotated[
    Path | None,
    typer.Option("--claude-dir", help="Path to Claude data directory"),
]

# Encoded project ids start with "-"; pass them after "--" on the command line.
ProjectIdArgument = Annotated[str, typer.Argument(help="Encoded project directory name")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Claude Code session log inspector."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def parse(
    file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Session JSONL file")],
    page_size: Annotated[int, typer.Option("--page-size", min=1)] = DEFAULT_PAGE_SIZE,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full parse as JSON")] = False,
) -> None:
    """Parse a session log and print its summary and stats."""
    parsed = parse_transcript(_read(file), page_size=page_size)
    if as_json:
        typer.echo(parsed.model_dump_json(indent=2))
        return

    stats = parsed.stats
    typer.echo(f"Summary:    {parsed.summary}")
    typer.echo(f"Prompts:    {stats.prompt_count}")
    typer.echo(f"Messages:   {stats.message_count}")
    typer.echo(f"Tool calls: {stats.tool_call_count}")
    typer.echo(f"Cost:       ${stats.total_cost_usd:.4f}")
    typer.echo(f"Duration:   {stats.duration_ms / 1000:.1f}s")
    typer.echo(f"Pages:      {stats.total_pages}")
    for name, count in sorted(stats.tool_breakdown.items(), key=lambda kv: (-kv[1], kv[0])):
        typer.echo(f"  {name}: {count}")


@app.command()
def page(
    file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Session JSONL file")],
    page_number: Annotated[int, typer.Option("--page", help="1-based page, newest first")] = 1,
    per_page: Annotated[int, typer.Option("--per-page", min=1)] = DEFAULT_PAGE_SIZE,
) -> None:
    """Print one newest-first page of a session log as JSON."""
    parsed = parse_transcript(_read(file), page_size=per_page)
    typer.echo(paginate_messages(parsed.messages, page_number, per_page).model_dump_json(indent=2))


@app.command()
def projects(claude_dir: ClaudeDirOption = None) -> None:
    """List projects with session logs."""
    service = SessionService(_config(claude_dir))
    result = asyncio.run(service.list_projects())
    for project in _unwrap(result):
        typer.echo(f"{project.project_id}\t{project.session_count}\t{project.display_name}")


@app.command()
def sessions(
    project_id: ProjectIdArgument,
    claude_dir: ClaudeDirOption = None,
) -> None:
    """List the sessions of a project with their summaries."""
    service = SessionService(_config(claude_dir))
    result = asyncio.run(service.list_sessions(project_id))
    for session in _unwrap(result):
        cost = session.stats.total_cost_usd if session.stats else 0.0
        typer.echo(f"{session.id}\t{session.message_count}\t${cost:.4f}\t{session.summary}")


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Text to find in summaries or project names")],
    claude_dir: ClaudeDirOption = None,
) -> None:
    """Find sessions across all projects, newest first."""
    service = SessionService(_config(claude_dir))
    result = asyncio.run(service.search_sessions(query))
    for session in _unwrap(result):
        typer.echo(f"{session.project_id}\t{session.id}\t{session.summary}")


@app.command()
def delete(
    project_id: ProjectIdArgument,
    session_id: Annotated[str, typer.Argument(help="Session id (log file stem)")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    claude_dir: ClaudeDirOption = None,
) -> None:
    """Delete a session log from disk."""
    if not yes:
        typer.confirm(f"Delete session {session_id}?", abort=True)
    service = SessionService(_config(claude_dir))
    _unwrap(asyncio.run(service.delete_session(project_id, session_id)))
    typer.echo(f"Deleted {session_id}")


@app.command()
def show(
    project_id: ProjectIdArgument,
    session_id: Annotated[str, typer.Argument(help="Session id (log file stem)")],
    page_number: Annotated[int, typer.Option("--page")] = 1,
    claude_dir: ClaudeDirOption = None,
) -> None:
    """Print a session's stats and one page of its messages as JSON."""
    service = SessionService(_config(claude_dir))
    result = asyncio.run(service.get_session_detail(project_id, session_id, page=page_number))
    typer.echo(_unwrap(result).model_dump_json(indent=2))


@app.command()
def agent(
    project_id: ProjectIdArgument,
    session_id: Annotated[str, typer.Argument(help="Parent session id")],
    agent_id: Annotated[str, typer.Argument(help="Sub-agent id, with or without 'agent-'")],
    page_number: Annotated[int, typer.Option("--page")] = 1,
    claude_dir: ClaudeDirOption = None,
) -> None:
    """Print one page of a sub-agent's transcript as JSON."""
    service = SessionService(_config(claude_dir))
    result = asyncio.run(
        service.get_agent_transcript(project_id, session_id, agent_id, page=page_number)
    )
    typer.echo(_unwrap(result).model_dump_json(indent=2))


def _config(claude_dir: Path | None) -> Config:
    return Config(claude_dir=claude_dir or Path.home() / ".claude")


def _read(file: Path) -> str:
    try:
        return file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _unwrap[T](result: Result[T, str]) -> T:
    if isinstance(result, Err):
        typer.echo(f"Error: {result.err_value}", err=True)
        raise typer.Exit(code=1)
    return result.ok_value
