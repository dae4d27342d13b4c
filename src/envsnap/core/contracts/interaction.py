"""InteractionRecord: lightweight metadata about one user interaction."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InteractionRecord(BaseModel):
    """A click/input/change event seen by the event binder."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="DOM event type, e.g. 'click'")
    tag: str | None = Field(default=None, description="Target element tag name, if any")
    time: int = Field(description="Epoch milliseconds when the event was recorded")


__all__ = ["InteractionRecord"]
