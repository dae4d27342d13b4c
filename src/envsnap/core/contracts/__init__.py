"""Pydantic contracts exchanged by the collector, the API and the CLI."""

from __future__ import annotations

from .interaction import InteractionRecord
from .snapshot import TRIGGERS, Snapshot, Trigger

__all__ = ["InteractionRecord", "Snapshot", "Trigger", "TRIGGERS"]
