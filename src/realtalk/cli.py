"""realtalk command line: replay recorded server events and inspect session config."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from realtalk.config import Settings, load_settings
from realtalk.engine import TurnView
from realtalk.gateway import QueueGateway
from realtalk.logging_utils import configure_logging
from realtalk.session import RealtimeSession
from realtalk.tools import RecordingNavigator

app = typer.Typer(name="realtalk", help="Voice transcript reconciliation and tool dispatch", add_completion=False)


def _load(pages: list[str] | None) -> Settings:
    return load_settings(pages=pages or None)


def _render_transcript(console: Console, turns: list[TurnView]) -> None:
    table = Table(title="Transcript (newest first)")
    table.add_column("id", style="dim", no_wrap=True)
    table.add_column("user")
    table.add_column("agent")
    for turn in turns:
        table.add_row(turn.id, turn.user_text or "", turn.agent_text or "")
    console.print(table)


@app.command()
def replay(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSONL file of server events"),  # noqa: B008
    pages: list[str] | None = typer.Option(None, "--page", "-p", help="Navigable page, repeatable"),  # noqa: B008
    show_outbound: bool = typer.Option(True, "--outbound/--no-outbound", help="Print outbound client events"),
) -> None:
    """Feed recorded server events through a session and print the result."""

    settings = _load(pages)
    configure_logging(profile="console", level=settings.log_level)
    console = Console()
    gateway = QueueGateway()
    navigator = RecordingNavigator()
    session = RealtimeSession.build(settings, gateway=gateway, navigator=navigator)

    gateway.open()
    session.on_open()
    with path.open("r", encoding="utf-8") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if line:
                session.handle_message(line)
    session.close()
    gateway.close()

    _render_transcript(console, session.transcript)
    if show_outbound:
        for event in gateway.drain():
            console.print_json(json.dumps(event, ensure_ascii=False))
    for page in navigator.pages:
        console.print(f"navigate -> {page}")


@app.command("session-config")
def session_config(
    pages: list[str] | None = typer.Option(None, "--page", "-p", help="Navigable page, repeatable"),  # noqa: B008
) -> None:
    """Print the session.update event sent when the channel opens."""

    session = RealtimeSession.build(_load(pages), gateway=QueueGateway(), navigator=RecordingNavigator())
    typer.echo(json.dumps(session.session_update().to_wire(), ensure_ascii=False, indent=2))
