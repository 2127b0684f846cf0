from __future__ import annotations

import json
from pathlib import Path

import pytest
from fixtures_events import agent_delta, message_done, navigate_call, user_completed, user_delta
from typer.testing import CliRunner

from realtalk.cli import app


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("REALTALK_PAGES", "REALTALK_MAX_RESPONSE_TOKENS", "REALTALK_INSTRUCTIONS", "REALTALK_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_session_config_prints_update_event() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["session-config", "--page", "/", "-p", "/pricing"])

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["type"] == "session.update"
    assert payload["session"]["tools"][0]["parameters"]["properties"]["page"]["enum"] == ["/", "/pricing"]
    assert payload["session"]["max_response_output_tokens"] == 300
    assert 'navigate(page: "/", "/pricing")' in payload["session"]["instructions"]


def test_replay_renders_transcript_and_navigation(tmp_path: Path) -> None:
    recording = tmp_path / "session.jsonl"
    events = [
        user_delta("Hi"),
        agent_delta("Hello"),
        user_completed("Hi."),
        message_done("Hello!"),
        navigate_call("/about"),
        {"type": "session.created"},
    ]
    recording.write_text("\n".join(json.dumps(event) for event in events) + "\n\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["replay", str(recording), "--no-outbound"])

    assert result.exit_code == 0
    assert "Transcript (newest first)" in result.output
    assert "Hello!" in result.output
    assert "navigate -> /about" in result.output
    assert "conversation.item.create" not in result.output


def test_replay_prints_outbound_events(tmp_path: Path) -> None:
    recording = tmp_path / "session.jsonl"
    recording.write_text(json.dumps(navigate_call("/", "c7")) + "\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(app, ["replay", str(recording)])

    assert result.exit_code == 0
    assert "session.update" in result.output
    assert "conversation.item.create" in result.output
    assert "c7" in result.output


def test_replay_requires_existing_file(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["replay", str(tmp_path / "missing.jsonl")])

    assert result.exit_code != 0
