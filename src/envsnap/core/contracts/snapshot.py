"""Snapshot contracts: the composite record produced by one collection.

This module defines Pydantic v2 models for the five snapshot sections and the
`Snapshot` envelope that stamps them with a trigger label and a collection
time.

Serialization
-------------
Python attributes are snake_case; the JSON form uses the camelCase keys a page
script would emit (``collectedAt``, ``basicEnvironment``, ``nowISO`` ...).
Use :meth:`Snapshot.to_payload` to get that form.

Immutability
------------
All models are frozen. A snapshot is superseded by the next one, never
merged or patched.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Trigger = Literal[
    "manual",
    "load",
    "click",
    "input",
    "change",
    "scroll",
    "visibilitychange",
    "updatedData",
]

#: Trigger labels accepted by :func:`envsnap.collector.aggregator.collect_all`.
TRIGGERS: frozenset[str] = frozenset(get_args(Trigger))


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


# --------------------------------------------------------------------------- #
# basicEnvironment
# --------------------------------------------------------------------------- #


class BasicEnvironment(_Frozen):
    """Navigator-level facts about the client."""

    user_agent: str | None = None
    platform: str | None = None
    language: str | None = None
    languages: list[str] = Field(default_factory=list)
    device_memory: float | None = None
    hardware_concurrency: int | None = None
    vendor: str | None = None
    app_name: str | None = None
    app_version: str | None = None
    max_touch_points: int = 0
    online_status: bool = False
    cookie_enabled: bool = False
    do_not_track: str | None = None
    pdf_viewer_status: bool = False
    web_driver: bool = False
    connection: Any = Field(default_factory=dict)
    mime_types: Any = Field(default_factory=dict)
    plugins: Any = Field(default_factory=dict)
    product: str | None = None
    product_sub: str | None = None
    user_activation: Any = Field(default_factory=dict)
    user_agent_data: Any = Field(default_factory=dict)
    virtual_keyboard: Any = Field(default_factory=dict)


# --------------------------------------------------------------------------- #
# tabDetails
# --------------------------------------------------------------------------- #


class TabState(_Frozen):
    visibility_state: str | None = None
    hidden: bool | None = None
    has_focus: bool = False
    ready_state: str | None = None


class TabLifecycle(_Frozen):
    was_discarded: bool = False
    prerendering: bool = False


class TabUi(_Frozen):
    fullscreen: bool = False
    pointer_locked: bool = False


class TabIdentity(_Frozen):
    title: str | None = None


class TabDetails(_Frozen):
    """Document state of the tab the collector runs in."""

    state: TabState
    lifecycle: TabLifecycle
    ui: TabUi
    identity: TabIdentity


# --------------------------------------------------------------------------- #
# urlDetails
# --------------------------------------------------------------------------- #


class UrlRaw(_Frozen):
    href: str = ""


class UrlOrigin(_Frozen):
    protocol: str = ""
    origin: str = ""
    host: str = ""
    hostname: str = ""
    port: str = ""
    is_secure: bool = False


class UrlPath(_Frozen):
    pathname: str = ""
    segments: list[str] = Field(default_factory=list)
    depth: int = 0
    has_trailing_slash: bool = False


class UrlQuery(_Frozen):
    raw: str = ""
    params: dict[str, str] = Field(default_factory=dict)


class UrlAuth(_Frozen):
    password_present: bool = False


class UrlNavigation(_Frozen):
    referrer: str | None = None


class UrlDetails(_Frozen):
    """Decomposed `window.location` plus the document referrer."""

    raw: UrlRaw
    origin: UrlOrigin
    path: UrlPath
    query: UrlQuery
    hash: str = ""
    auth: UrlAuth
    navigation: UrlNavigation


# --------------------------------------------------------------------------- #
# screenDisplay
# --------------------------------------------------------------------------- #


class ScreenMetrics(_Frozen):
    width: int | None = None
    height: int | None = None
    avail_width: int | None = None
    avail_height: int | None = None
    color_depth: int | None = None
    pixel_depth: int | None = None


class Viewport(_Frozen):
    inner_width: int | None = None
    inner_height: int | None = None
    outer_width: int | None = None
    outer_height: int | None = None


class Density(_Frozen):
    device_pixel_ratio: float = 1


class Orientation(_Frozen):
    type: str
    angle: int


class DisplayPreferences(_Frozen):
    dark_mode: bool = False
    reduced_motion: bool = False
    high_contrast: bool = False


class ColorGamut(_Frozen):
    srgb: bool = False
    p3: bool = False
    rec2020: bool = False


class ColorSupport(_Frozen):
    hdr: bool = False
    gamut: ColorGamut


class ScreenDisplay(_Frozen):
    """Screen, viewport and media-query derived display facts."""

    screen: ScreenMetrics
    viewport: Viewport
    density: Density
    orientation: Orientation | None = None
    preferences: DisplayPreferences
    color: ColorSupport


# --------------------------------------------------------------------------- #
# timeLocale
# --------------------------------------------------------------------------- #


class TimeInfo(_Frozen):
    now_iso: str = Field(alias="nowISO")
    epoch_ms: int
    timezone_offset_minutes: int
    timezone: str | None = None


class LocaleInfo(_Frozen):
    primary: str | None = None
    calendar: str | None = None
    numbering_system: str | None = None


class TimeLocale(_Frozen):
    """Clock reading and resolved Intl options."""

    time: TimeInfo
    locale: LocaleInfo


# --------------------------------------------------------------------------- #
# Envelope
# --------------------------------------------------------------------------- #


class Snapshot(_Frozen):
    """One complete, timestamped collection of the client environment.

    Attributes
    ----------
    trigger : Trigger
        Why this snapshot was collected (``load``, ``click``, ``scroll`` ...).
    collected_at : int
        Collection time in epoch milliseconds.
    """

    trigger: Trigger = "manual"
    collected_at: int
    basic_environment: BasicEnvironment
    tab_details: TabDetails
    url_details: UrlDetails
    screen_display: ScreenDisplay
    time_locale: TimeLocale

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase, JSON-safe form of this snapshot."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "Trigger",
    "TRIGGERS",
    "BasicEnvironment",
    "TabDetails",
    "TabState",
    "TabLifecycle",
    "TabUi",
    "TabIdentity",
    "UrlDetails",
    "UrlRaw",
    "UrlOrigin",
    "UrlPath",
    "UrlQuery",
    "UrlAuth",
    "UrlNavigation",
    "ScreenDisplay",
    "ScreenMetrics",
    "Viewport",
    "Density",
    "Orientation",
    "DisplayPreferences",
    "ColorSupport",
    "ColorGamut",
    "TimeLocale",
    "TimeInfo",
    "LocaleInfo",
    "Snapshot",
]
