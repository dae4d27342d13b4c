"""
Field readers: one pure function per snapshot section.

Each reader takes an :class:`~envsnap.core.host.EnvironmentProvider` and
returns a frozen contract model. Readers never write to the host.

Coalescing
----------
Missing host properties become ``None``, ``False``, ``0`` or an empty
container instead of raising. The coalescing is truthiness-based, the same
as a page script's ``value || default``: a host reporting ``deviceMemory: 0``
yields ``None``.

The only guarded lookup is the screen orientation; any failure there turns
into ``orientation=None``. Every other failure propagates to the aggregator.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar
from urllib.parse import parse_qsl

from envsnap.core.contracts.snapshot import (
    BasicEnvironment,
    ColorGamut,
    ColorSupport,
    Density,
    DisplayPreferences,
    LocaleInfo,
    Orientation,
    ScreenDisplay,
    ScreenMetrics,
    TabDetails,
    TabIdentity,
    TabLifecycle,
    TabState,
    TabUi,
    TimeInfo,
    TimeLocale,
    UrlAuth,
    UrlDetails,
    UrlNavigation,
    UrlOrigin,
    UrlPath,
    UrlQuery,
    UrlRaw,
    Viewport,
)
from envsnap.core.host import EnvironmentProvider

T = TypeVar("T")

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _or(source: Mapping[str, Any], key: str, default: Any) -> Any:
    """Return ``source[key]`` when truthy, else ``default``."""
    value = source.get(key)
    return value if value else default


def _sequence(source: Mapping[str, Any], key: str) -> list[Any]:
    """Return ``source[key]`` as a list when it is a list or tuple, else ``[]``."""
    value = source.get(key)
    return list(value) if isinstance(value, list | tuple) else []


def safe(fn: Callable[[], T], fallback: T) -> T:
    """Call ``fn`` and return ``fallback`` if it raises."""
    try:
        return fn()
    except Exception:
        return fallback


def parse_query(search: str) -> dict[str, str]:
    """Decode a ``?a=1&b=2`` string into a dict; repeated keys keep the last value."""
    return dict(parse_qsl(search.lstrip("?"), keep_blank_values=True))


# --------------------------------------------------------------------------- #
# Readers
# --------------------------------------------------------------------------- #


def basic_environment(provider: EnvironmentProvider) -> BasicEnvironment:
    """Read navigator-level facts."""
    nav = provider.navigator() or {}
    return BasicEnvironment(
        user_agent=_or(nav, "userAgent", None),
        platform=_or(nav, "platform", None),
        language=_or(nav, "language", None),
        languages=_sequence(nav, "languages"),
        device_memory=_or(nav, "deviceMemory", None),
        hardware_concurrency=_or(nav, "hardwareConcurrency", None),
        vendor=_or(nav, "vendor", None),
        app_name=_or(nav, "appName", None),
        app_version=_or(nav, "appVersion", None),
        max_touch_points=_or(nav, "maxTouchPoints", 0),
        online_status=bool(_or(nav, "onLine", False)),
        cookie_enabled=bool(_or(nav, "cookieEnabled", False)),
        do_not_track=_or(nav, "doNotTrack", None),
        pdf_viewer_status=bool(_or(nav, "pdfViewerEnabled", False)),
        web_driver=bool(_or(nav, "webdriver", False)),
        connection=_or(nav, "connection", {}),
        mime_types=_or(nav, "mimeTypes", {}),
        plugins=_or(nav, "plugins", {}),
        product=_or(nav, "product", None),
        product_sub=_or(nav, "productSub", None),
        user_activation=_or(nav, "userActivation", {}),
        user_agent_data=_or(nav, "userAgentData", {}),
        virtual_keyboard=_or(nav, "virtualKeyboard", {}),
    )


def tab_details(provider: EnvironmentProvider) -> TabDetails:
    """Read document visibility, lifecycle, UI mode and title."""
    doc = provider.document()
    return TabDetails(
        state=TabState(
            visibility_state=doc.get("visibilityState"),
            hidden=doc.get("hidden"),
            has_focus=provider.has_focus(),
            ready_state=doc.get("readyState"),
        ),
        lifecycle=TabLifecycle(
            was_discarded=bool(_or(doc, "wasDiscarded", False)),
            prerendering=bool(_or(doc, "prerendering", False)),
        ),
        ui=TabUi(
            fullscreen=bool(doc.get("fullscreenElement")),
            pointer_locked=bool(doc.get("pointerLockElement")),
        ),
        identity=TabIdentity(title=doc.get("title")),
    )


def url_details(provider: EnvironmentProvider) -> UrlDetails:
    """Decompose the current location and attach the referrer."""
    loc = provider.location()
    pathname = str(loc.get("pathname") or "")
    segments = [s for s in pathname.split("/") if s]
    search = str(loc.get("search") or "")
    protocol = str(loc.get("protocol") or "")
    return UrlDetails(
        raw=UrlRaw(href=str(loc.get("href") or "")),
        origin=UrlOrigin(
            protocol=protocol,
            origin=str(loc.get("origin") or ""),
            host=str(loc.get("host") or ""),
            hostname=str(loc.get("hostname") or ""),
            port=str(loc.get("port") or ""),
            is_secure=protocol == "https:",
        ),
        path=UrlPath(
            pathname=pathname,
            segments=segments,
            depth=len(segments),
            has_trailing_slash=pathname.endswith("/"),
        ),
        query=UrlQuery(raw=search, params=parse_query(search)),
        hash=str(loc.get("hash") or ""),
        auth=UrlAuth(password_present=bool(loc.get("password"))),
        navigation=UrlNavigation(referrer=_or(provider.document(), "referrer", None)),
    )


def _orientation(screen: Mapping[str, Any]) -> Orientation:
    raw = screen["orientation"]
    return Orientation(type=raw["type"], angle=raw["angle"])


def screen_display(provider: EnvironmentProvider) -> ScreenDisplay:
    """Read screen metrics, viewport, pixel density and media preferences."""
    screen = provider.screen() or {}
    win = provider.window()
    media = provider.match_media
    return ScreenDisplay(
        screen=ScreenMetrics(
            width=screen.get("width"),
            height=screen.get("height"),
            avail_width=screen.get("availWidth"),
            avail_height=screen.get("availHeight"),
            color_depth=screen.get("colorDepth"),
            pixel_depth=screen.get("pixelDepth"),
        ),
        viewport=Viewport(
            inner_width=win.get("innerWidth"),
            inner_height=win.get("innerHeight"),
            outer_width=win.get("outerWidth"),
            outer_height=win.get("outerHeight"),
        ),
        density=Density(device_pixel_ratio=_or(win, "devicePixelRatio", 1)),
        orientation=safe(lambda: _orientation(screen), None),
        preferences=DisplayPreferences(
            dark_mode=media("(prefers-color-scheme: dark)"),
            reduced_motion=media("(prefers-reduced-motion: reduce)"),
            high_contrast=media("(prefers-contrast: more)"),
        ),
        color=ColorSupport(
            hdr=media("(dynamic-range: high)"),
            gamut=ColorGamut(
                srgb=media("(color-gamut: srgb)"),
                p3=media("(color-gamut: p3)"),
                rec2020=media("(color-gamut: rec2020)"),
            ),
        ),
    )


def time_locale(provider: EnvironmentProvider) -> TimeLocale:
    """Read the client clock, its UTC offset and the resolved Intl options."""
    now = provider.now()
    offset = now.utcoffset()
    offset_minutes = int(offset.total_seconds() // 60) if offset is not None else 0
    intl = provider.intl()
    nav = provider.navigator() or {}
    return TimeLocale(
        time=TimeInfo(
            now_iso=now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.")
            + f"{now.microsecond // 1000:03d}Z",
            epoch_ms=(now - _EPOCH) // timedelta(milliseconds=1),
            # Minutes to add to local time to reach UTC.
            timezone_offset_minutes=-offset_minutes,
            timezone=_or(intl, "timeZone", None),
        ),
        locale=LocaleInfo(
            primary=_or(nav, "language", None),
            calendar=_or(intl, "calendar", None),
            numbering_system=_or(intl, "numberingSystem", None),
        ),
    )


#: Section name -> reader, in snapshot order.
READERS: dict[str, Callable[[EnvironmentProvider], Any]] = {
    "basic_environment": basic_environment,
    "tab_details": tab_details,
    "url_details": url_details,
    "screen_display": screen_display,
    "time_locale": time_locale,
}


__all__ = [
    "basic_environment",
    "tab_details",
    "url_details",
    "screen_display",
    "time_locale",
    "READERS",
    "safe",
    "parse_query",
]
