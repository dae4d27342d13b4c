"""Shared fixtures: a realistic host state, a pinned clock and a fake timer source."""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from envsnap.core.host import MappingProvider

#: 2024-05-01T12:00:00.123Z
FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, 123000, tzinfo=UTC)
FIXED_EPOCH_MS = 1714564800123

HOST_STATE: dict[str, Any] = {
    "navigator": {
        "userAgent": "Mozilla/5.0 (X11; Linux x86_64) Firefox/126.0",
        "platform": "Linux x86_64",
        "language": "de-DE",
        "languages": ["de-DE", "en-US"],
        "hardwareConcurrency": 8,
        "vendor": "",
        "maxTouchPoints": 0,
        "onLine": True,
        "cookieEnabled": True,
        "pdfViewerEnabled": True,
        "webdriver": False,
        "connection": {"effectiveType": "4g"},
    },
    "document": {
        "title": "Home",
        "visibilityState": "visible",
        "hidden": False,
        "hasFocus": True,
        "readyState": "complete",
        "referrer": "https://search.example/",
    },
    "location": {"href": "https://shop.example.com:8443/catalog/shoes/?size=42&color=red#top"},
    "screen": {
        "width": 1920,
        "height": 1080,
        "availWidth": 1920,
        "availHeight": 1040,
        "colorDepth": 24,
        "pixelDepth": 24,
        "orientation": {"type": "landscape-primary", "angle": 0},
    },
    "window": {
        "innerWidth": 1280,
        "innerHeight": 720,
        "outerWidth": 1296,
        "outerHeight": 800,
        "devicePixelRatio": 2,
    },
    "media": {"(prefers-color-scheme: dark)": True, "(color-gamut: srgb)": True},
    "intl": {"timeZone": "Europe/Berlin", "calendar": "gregory", "numberingSystem": "latn"},
    "clock": {"timezoneOffsetMinutes": -120},
}


@pytest.fixture  # type: ignore[misc]
def host_state() -> dict[str, Any]:
    """A deep copy of the reference host state, safe to mutate."""
    return copy.deepcopy(HOST_STATE)


@pytest.fixture  # type: ignore[misc]
def provider(host_state: dict[str, Any]) -> MappingProvider:
    """Provider over the reference host state with the clock pinned to FIXED_NOW."""
    return MappingProvider(host_state, clock=lambda: FIXED_NOW)


class FakeTimer:
    def __init__(self, when: float, callback: Callable[[], Any]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for ``loop.call_later``; time moves via ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted(
            (t for t in self.timers if not t.cancelled and t.when <= self.now + 1e-9),
            key=lambda t: t.when,
        )
        for timer in due:
            timer.cancelled = True
            timer.callback()


@pytest.fixture  # type: ignore[misc]
def scheduler() -> FakeScheduler:
    return FakeScheduler()
