# tests/test_cli.py
"""
Tests for the envsnap command-line interface.

We use `typer.testing.CliRunner` to invoke the app in-process. Replay scripts
use ``at_ms`` offsets of a few milliseconds so the real event loop finishes
within one debounce window.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from conftest import HOST_STATE
from typer.testing import CliRunner

from envsnap.cli import app


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    return CliRunner()


def _write(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_help_shows_commands(runner: CliRunner) -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0, result.output
    assert "collect" in result.output
    assert "replay" in result.output


def test_collect_renders_tables(runner: CliRunner, tmp_path: Path) -> None:
    host = _write(tmp_path / "host.json", HOST_STATE)
    result = runner.invoke(app, ["collect", str(host), "--trigger", "load"])
    assert result.exit_code == 0, result.output
    assert "load" in result.output
    assert "identity.title" in result.output
    assert "Home" in result.output


def test_collect_json_output(runner: CliRunner, tmp_path: Path) -> None:
    host = _write(tmp_path / "host.json", HOST_STATE)
    result = runner.invoke(app, ["collect", str(host), "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["trigger"] == "manual"
    assert payload["urlDetails"]["path"]["segments"] == ["catalog", "shoes"]


def test_collect_unknown_trigger(runner: CliRunner, tmp_path: Path) -> None:
    host = _write(tmp_path / "host.json", HOST_STATE)
    result = runner.invoke(app, ["collect", str(host), "--trigger", "hover"])
    assert result.exit_code == 2
    assert "Unknown trigger" in result.output


def test_collect_missing_file(runner: CliRunner) -> None:
    result = runner.invoke(app, ["collect", "ghost.json"])
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_collect_malformed_json(runner: CliRunner, tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["collect", str(bad)])
    assert result.exit_code == 1
    assert "Collection Error" in result.output


def test_replay_lists_snapshots_and_writes_output(runner: CliRunner, tmp_path: Path) -> None:
    script = _write(
        tmp_path / "script.json",
        {
            "host_state": HOST_STATE,
            "events": [
                {"type": "load", "at_ms": 0},
                {"type": "click", "tag": "BUTTON", "at_ms": 1},
                {"type": "scroll", "at_ms": 2},
                {"type": "scroll", "at_ms": 3},
                {"type": "scroll", "at_ms": 4, "host_state": {"document": {"title": "Scrolled"}}},
            ],
        },
    )
    out = tmp_path / "out" / "replay.json"

    result = runner.invoke(
        app, ["replay", str(script), "--output", str(out), "--debounce-ms", "200"]
    )

    assert result.exit_code == 0, result.output
    assert "1 interaction(s) recorded" in result.output

    saved = json.loads(out.read_text(encoding="utf-8"))
    assert [s["trigger"] for s in saved["snapshots"]] == ["load", "click", "scroll"]
    assert saved["snapshots"][-1]["tabDetails"]["identity"]["title"] == "Scrolled"
    assert saved["history"] == [
        {"type": "click", "tag": "BUTTON", "time": saved["history"][0]["time"]}
    ]


def test_replay_rejects_bad_events(runner: CliRunner, tmp_path: Path) -> None:
    script = _write(tmp_path / "script.json", {"events": "load"})
    result = runner.invoke(app, ["replay", str(script)])
    assert result.exit_code == 1
    assert "Replay Error" in result.output


def test_replay_rejects_malformed_event_items(runner: CliRunner, tmp_path: Path) -> None:
    cases: list[list[Any]] = [
        ["load"],
        [{"type": "scroll", "host_state": {"navigator": None}}],
        [{"type": "scroll", "host_state": ["window"]}],
        [{"type": "load", "at_ms": None}],
    ]
    for events in cases:
        script = _write(tmp_path / "script.json", {"host_state": HOST_STATE, "events": events})
        result = runner.invoke(app, ["replay", str(script)])
        assert result.exit_code == 1, events
        assert "Replay Error" in result.output, events
        assert isinstance(result.exception, SystemExit), events
