"""
Host abstraction: what the collector is allowed to read and listen to.

A page script reads `navigator`, `document`, `window.location`, `window.screen`,
`matchMedia`, `Date` and `Intl` directly. Here those globals sit behind an
:class:`EnvironmentProvider` so collectors can run against any host: a JSON
document posted by a page beacon, a recorded session, or a test fake.

Components
----------
- :class:`EnvironmentProvider`: read-only protocol consumed by the field readers.
- :class:`MappingProvider`: provider backed by a "host state" mapping.
- :class:`HostEvent` / :class:`EventHub`: a tiny event target standing in for
  `window` and `document` event registration.

Host state layout
-----------------
``MappingProvider`` expects the camelCase keys of the browser objects::

    {
      "navigator": {"userAgent": "...", "languages": ["en-US"], ...},
      "document":  {"title": "Home", "visibilityState": "visible", "hasFocus": true, ...},
      "location":  {"href": "https://example.com/a/b?x=1#top"},
      "screen":    {"width": 1920, ..., "orientation": {"type": "landscape-primary", "angle": 0}},
      "window":    {"innerWidth": 1280, "devicePixelRatio": 2, ...},
      "media":     {"(prefers-color-scheme: dark)": true},
      "intl":      {"timeZone": "Europe/Berlin", "calendar": "gregory", "numberingSystem": "latn"},
      "clock":     {"timezoneOffsetMinutes": -60}
    }

Every section is optional. Location components missing next to ``href`` are
derived from it.
"""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit

Listener = Callable[["HostEvent"], None]

#: Event types raised on `window`; every other type is raised on `document`.
WINDOW_EVENTS: frozenset[str] = frozenset({"load", "scroll"})


@runtime_checkable
class EnvironmentProvider(Protocol):
    """Read-only view of the host globals the field readers consume."""

    def navigator(self) -> Mapping[str, Any] | None: ...

    def document(self) -> Mapping[str, Any]: ...

    def has_focus(self) -> bool: ...

    def location(self) -> Mapping[str, Any]: ...

    def screen(self) -> Mapping[str, Any] | None: ...

    def window(self) -> Mapping[str, Any]: ...

    def match_media(self, query: str) -> bool: ...

    def now(self) -> datetime:
        """Return the client's current time as an aware datetime in its local zone."""
        ...

    def intl(self) -> Mapping[str, Any]: ...


def expand_location(location: Mapping[str, Any]) -> dict[str, Any]:
    """Fill `window.location` components from ``href``.

    Explicit keys in ``location`` win over derived ones, so a host that
    reports a custom ``origin`` keeps it.
    """
    href = str(location.get("href") or "")
    parts = urlsplit(href)
    protocol = f"{parts.scheme}:" if parts.scheme else ""
    hostname = parts.hostname or ""
    port = str(parts.port) if parts.port is not None else ""
    host = f"{hostname}:{port}" if port else hostname
    derived: dict[str, Any] = {
        "href": href,
        "protocol": protocol,
        "host": host,
        "hostname": hostname,
        "port": port,
        "pathname": parts.path or ("/" if host else ""),
        "search": f"?{parts.query}" if parts.query else "",
        "hash": f"#{parts.fragment}" if parts.fragment else "",
        "origin": f"{protocol}//{host}" if host else "null",
        "password": parts.password or "",
    }
    derived.update({k: v for k, v in location.items() if v is not None})
    return derived


class MappingProvider:
    """EnvironmentProvider backed by a host-state mapping.

    Parameters
    ----------
    host_state:
        Mapping in the layout described in the module docstring.
    clock:
        Optional zero-argument callable returning an aware UTC datetime.
        Defaults to the real clock unless the host state pins ``clock.epochMs``.
    """

    def __init__(
        self,
        host_state: Mapping[str, Any] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state: dict[str, Any] = {}
        self._clock = clock
        self.update(host_state or {})

    @classmethod
    def from_json(cls, path: Path) -> MappingProvider:
        """Build a provider from a JSON host-state file."""
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"host state in {path} must be a JSON object")
        return cls(data)

    def update(self, host_state: Mapping[str, Any]) -> None:
        """Replace the whole host state (a page sends a fresh one per beacon)."""
        self._state = dict(host_state)

    def patch(self, section: str, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into one host-state section."""
        current = dict(self._section(section))
        current.update(values)
        self._state[section] = current

    def _section(self, name: str) -> Mapping[str, Any]:
        value = self._state.get(name)
        return value if isinstance(value, Mapping) else {}

    # ----- EnvironmentProvider ---------------------------------------------

    def navigator(self) -> Mapping[str, Any] | None:
        value = self._state.get("navigator")
        return value if isinstance(value, Mapping) else None

    def document(self) -> Mapping[str, Any]:
        return self._section("document")

    def has_focus(self) -> bool:
        return bool(self._section("document").get("hasFocus", False))

    def location(self) -> Mapping[str, Any]:
        return expand_location(self._section("location"))

    def screen(self) -> Mapping[str, Any] | None:
        value = self._state.get("screen")
        return value if isinstance(value, Mapping) else None

    def window(self) -> Mapping[str, Any]:
        return self._section("window")

    def match_media(self, query: str) -> bool:
        return bool(self._section("media").get(query, False))

    def now(self) -> datetime:
        clock = self._section("clock")
        offset = timedelta(minutes=-int(clock.get("timezoneOffsetMinutes", 0)))
        if self._clock is not None:
            current = self._clock()
        elif "epochMs" in clock:
            current = datetime.fromtimestamp(int(clock["epochMs"]) / 1000, UTC)
        else:
            current = datetime.now(UTC)
        return current.astimezone(timezone(offset))

    def intl(self) -> Mapping[str, Any]:
        return self._section("intl")


# --------------------------------------------------------------------------- #
# Events
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class HostEvent:
    """A DOM-like event: its type and the tag name of its target, if any."""

    type: str
    tag: str | None = None


class EventSource(Protocol):
    """Subset of the DOM EventTarget API the event binder needs."""

    def add_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None: ...

    def remove_event_listener(
        self, type: str, listener: Listener, capture: bool = False
    ) -> None: ...


class EventHub:
    """In-process event target standing in for `window` or `document`.

    Capture listeners run before bubble listeners; within a phase listeners
    run in registration order. Registering the same listener twice for the
    same type and phase is a no-op, as in the DOM.
    """

    def __init__(self, name: str = "target") -> None:
        self.name = name
        self._listeners: dict[tuple[str, bool], list[Listener]] = defaultdict(list)

    def add_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None:
        bucket = self._listeners[(type, capture)]
        if listener not in bucket:
            bucket.append(listener)

    def remove_event_listener(self, type: str, listener: Listener, capture: bool = False) -> None:
        bucket = self._listeners.get((type, capture), [])
        if listener in bucket:
            bucket.remove(listener)

    def listener_count(self, type: str) -> int:
        return len(self._listeners.get((type, True), [])) + len(
            self._listeners.get((type, False), [])
        )

    def dispatch(self, event: HostEvent) -> None:
        """Deliver ``event`` to every listener registered for its type."""
        for capture in (True, False):
            for listener in list(self._listeners.get((event.type, capture), [])):
                listener(event)


__all__ = [
    "EnvironmentProvider",
    "MappingProvider",
    "expand_location",
    "HostEvent",
    "EventSource",
    "EventHub",
    "Listener",
    "WINDOW_EVENTS",
]
