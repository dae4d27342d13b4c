# src/envsnap/cli.py
"""
envsnap Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **Collect**: Read a host-state JSON file and render one snapshot.
- **Replay**: Feed a recorded event script (loads, clicks, scrolls ...) through
  a bound collector with its original timing, list every snapshot it produced
  and optionally save them with the interaction log.

Usage
-----
    $ envsnap collect host.json --trigger load
    $ envsnap collect host.json --json > snapshot.json
    $ envsnap replay session.json --output artifacts/replay.json

Replay script format
--------------------
    {
      "host_state": {...},
      "events": [
        {"type": "load", "at_ms": 0},
        {"type": "click", "tag": "BUTTON", "at_ms": 120},
        {"type": "scroll", "at_ms": 400, "host_state": {"window": {"scrollY": 300}}}
      ]
    }

``host_state_file`` (a path relative to the script) may replace the inline
``host_state``. A per-event ``host_state`` is merged section by section into
the current one before the event is dispatched.
"""

from __future__ import annotations

import asyncio
import json
import traceback
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from envsnap.collector.aggregator import CollectionError
from envsnap.collector.facade import ClientDataCollector, create_collector
from envsnap.core.contracts.snapshot import TRIGGERS, Snapshot
from envsnap.core.host import WINDOW_EVENTS, EventHub, HostEvent, MappingProvider
from envsnap.core.settings import load_settings

load_dotenv()

app = typer.Typer(
    help="envsnap: collect client environment snapshots from host state.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: Rendering & I/O
# --------------------------------------------------------------------------- #


def _flatten(prefix: str, value: Any, out: dict[str, Any]) -> None:
    if isinstance(value, dict) and value:
        for key, inner in value.items():
            _flatten(f"{prefix}.{key}" if prefix else key, inner, out)
    else:
        out[prefix] = value


def _render_snapshot(snapshot: Snapshot) -> None:
    """Render each snapshot section as a two-column table."""
    payload = snapshot.to_payload()
    console.rule(f"[bold]{payload['trigger']}[/bold] @ {payload['collectedAt']}")
    for section in (
        "basicEnvironment",
        "tabDetails",
        "urlDetails",
        "screenDisplay",
        "timeLocale",
    ):
        rows: dict[str, Any] = {}
        _flatten("", payload[section], rows)
        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column(style="cyan")
        table.add_column()
        for key, value in rows.items():
            table.add_row(key, json.dumps(value) if not isinstance(value, str) else value)
        console.print(Panel(table, title=section, border_style="blue", expand=False))


def _render_timeline(snapshots: list[Snapshot]) -> None:
    table = Table(title="Snapshots")
    table.add_column("#", justify="right")
    table.add_column("trigger", style="magenta")
    table.add_column("collectedAt")
    table.add_column("title")
    table.add_column("href")
    for i, snap in enumerate(snapshots, start=1):
        table.add_row(
            str(i),
            snap.trigger,
            str(snap.collected_at),
            snap.tab_details.identity.title or "",
            snap.url_details.raw.href,
        )
    console.print(table)


def _load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


# --------------------------------------------------------------------------- #
# Replay
# --------------------------------------------------------------------------- #


def _host_overrides(event: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Return an event's per-section host-state patch, rejecting non-object sections."""
    overrides = event.get("host_state") or {}
    if not isinstance(overrides, dict):
        raise ValueError("event host_state must be a JSON object")
    for section, values in overrides.items():
        if not isinstance(values, dict):
            raise ValueError(f"host_state section '{section}' must be a JSON object")
    return overrides


async def replay_events(
    provider: MappingProvider,
    events: list[dict[str, Any]],
    debounce_seconds: float,
) -> tuple[ClientDataCollector, list[Snapshot]]:
    """Dispatch ``events`` on fresh window/document hubs with their relative timing.

    Returns the collector and every snapshot it produced, in order. Waits one
    debounce window after the last event so a trailing scroll is collected.
    """
    window, document = EventHub("window"), EventHub("document")
    collector = create_collector(
        provider, window=window, document=document, debounce_seconds=debounce_seconds
    )
    produced: list[Snapshot] = []
    collector.on_update(produced.append)

    loop = asyncio.get_running_loop()
    start = loop.time()
    try:
        for event in events:
            if not isinstance(event, dict):
                raise ValueError(f"replay event must be a JSON object, got {event!r}")
            event_type = str(event["type"])
            overrides = _host_overrides(event)
            at = float(event.get("at_ms", 0)) / 1000.0
            delay = start + at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)
            for section, values in overrides.items():
                provider.patch(section, values)
            target = window if event_type in WINDOW_EVENTS else document
            target.dispatch(HostEvent(type=event_type, tag=event.get("tag")))

        if collector.binder.scroll_debouncer.pending:
            await asyncio.sleep(debounce_seconds + 0.01)
    finally:
        collector.close()

    return collector, produced


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def collect(
    host_state: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to a host-state JSON file.",
        ),
    ],
    trigger: Annotated[
        str,
        typer.Option("--trigger", "-t", help="Trigger label to stamp on the snapshot."),
    ] = "manual",
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the camelCase JSON payload instead of tables."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Collect one snapshot from a host-state file.
    """
    if trigger not in TRIGGERS:
        console.print(f"[bold red]Unknown trigger:[/bold red] {trigger}")
        console.print(f"[dim]Expected one of: {', '.join(sorted(TRIGGERS))}[/dim]")
        raise typer.Exit(code=2)

    try:
        provider = MappingProvider.from_json(host_state)
        snapshot = ClientDataCollector(provider).collect(trigger)
    except (ValueError, CollectionError) as e:
        console.print(f"[bold red]❌ Collection Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if as_json:
        print(json.dumps(snapshot.to_payload(), indent=2, sort_keys=True))
        return
    _render_snapshot(snapshot)


@app.command()  # type: ignore[misc]
def replay(
    script: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to a JSON replay script (host_state + events).",
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write snapshots and history to this JSON file."),
    ] = None,
    debounce_ms: Annotated[
        int | None,
        typer.Option("--debounce-ms", help="Override the scroll debounce window."),
    ] = None,
) -> None:
    """
    Replay a recorded event script through a bound collector.
    """
    if debounce_ms is None:
        debounce_ms = load_settings().scroll_debounce_ms

    try:
        data = _load_json(script)
        events = data.get("events", [])
        if not isinstance(events, list):
            raise ValueError("'events' must be a list")
        if "host_state_file" in data:
            provider = MappingProvider.from_json(script.parent / str(data["host_state_file"]))
        else:
            provider = MappingProvider(data.get("host_state") or {})
        collector, produced = asyncio.run(
            replay_events(provider, events, debounce_ms / 1000.0)
        )
    except (ValueError, KeyError, TypeError, OSError) as e:
        console.print(f"\n[bold red]❌ Replay Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    if collector.binder.last_error is not None:
        console.print(f"[yellow]Last collection failed:[/yellow] {collector.binder.last_error}")

    _render_timeline(produced)
    console.print(f"[dim]{len(collector.history())} interaction(s) recorded[/dim]")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "snapshots": [s.to_payload() for s in produced],
            "history": [r.model_dump() for r in collector.history()],
        }
        with output.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        console.print(
            Panel(f"Saved to: [link=file://{output}]{output}[/link]", border_style="green")
        )


if __name__ == "__main__":
    app()
