"""Unit tests for the host-state provider and location expansion."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from envsnap.core.host import EnvironmentProvider, MappingProvider, expand_location


def test_mapping_provider_satisfies_protocol() -> None:
    assert isinstance(MappingProvider({}), EnvironmentProvider)


def test_expand_location_from_href() -> None:
    loc = expand_location({"href": "https://example.com/a?x=1#frag"})
    assert loc["protocol"] == "https:"
    assert loc["host"] == "example.com"
    assert loc["port"] == ""
    assert loc["pathname"] == "/a"
    assert loc["search"] == "?x=1"
    assert loc["hash"] == "#frag"
    assert loc["origin"] == "https://example.com"


def test_expand_location_explicit_keys_win() -> None:
    loc = expand_location({"href": "https://example.com/", "origin": "https://cdn.example.com"})
    assert loc["origin"] == "https://cdn.example.com"


def test_expand_location_bare_host_gets_root_path() -> None:
    assert expand_location({"href": "https://example.com"})["pathname"] == "/"


def test_update_replaces_and_patch_merges() -> None:
    provider = MappingProvider({"document": {"title": "A", "readyState": "loading"}})
    provider.patch("document", {"readyState": "complete"})
    assert provider.document() == {"title": "A", "readyState": "complete"}

    provider.update({"document": {"title": "B"}})
    assert provider.document() == {"title": "B"}


def test_non_mapping_sections_are_ignored() -> None:
    provider = MappingProvider({"navigator": "nope", "screen": 42, "window": None})
    assert provider.navigator() is None
    assert provider.screen() is None
    assert provider.window() == {}


def test_match_media_defaults_false() -> None:
    provider = MappingProvider({"media": {"(prefers-contrast: more)": True}})
    assert provider.match_media("(prefers-contrast: more)") is True
    assert provider.match_media("(dynamic-range: high)") is False


def test_now_applies_client_offset() -> None:
    fixed = datetime(2024, 1, 1, 0, 0, tzinfo=UTC)
    provider = MappingProvider({"clock": {"timezoneOffsetMinutes": 60}}, clock=lambda: fixed)
    now = provider.now()
    assert now == fixed
    offset = now.utcoffset()
    assert offset is not None and offset.total_seconds() == -3600


def test_from_json(tmp_path: Path) -> None:
    path = tmp_path / "host.json"
    path.write_text(json.dumps({"document": {"title": "From file"}}), encoding="utf-8")
    assert MappingProvider.from_json(path).document()["title"] == "From file"


def test_from_json_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "host.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        MappingProvider.from_json(path)
