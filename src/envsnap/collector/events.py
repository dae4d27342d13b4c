"""
Event binder: turn host events into snapshot collections.

Bindings
--------
- window ``load``                      -> collect("load")
- document ``click``/``input``/``change`` (capture phase)
                                       -> record interaction, collect(<type>)
- window ``scroll``                    -> debounced, collect("scroll")
- document ``visibilitychange``        -> collect("visibilitychange")

Triggering does not wait on anyone: the binder calls
:func:`~envsnap.collector.aggregator.try_collect` and, when it comes back as
``Err``, logs a warning. A subscriber raising is caught the same way, so the
event source still reaches its other listeners. The error is also returned
to whoever called :meth:`EventBinder.trigger`.

Debounce
--------
Scroll events arm a single timer through ``scheduler.call_later``. Each new
scroll cancels the pending timer before arming a new one, so a burst of
scrolls closer together than the window yields exactly one collection. The
default scheduler is the asyncio loop running when the binder is bound.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from envsnap.collector.aggregator import CollectionError, collected_time, try_collect
from envsnap.collector.state import CollectorState
from envsnap.core.contracts.interaction import InteractionRecord
from envsnap.core.contracts.snapshot import TRIGGERS, Snapshot
from envsnap.core.host import EnvironmentProvider, EventSource, HostEvent, Listener
from envsnap.core.result import Result, err
from envsnap.core.settings import get_logger, load_settings

logger = get_logger("envsnap.events")

INTERACTION_EVENTS: tuple[str, ...] = ("click", "input", "change")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's ``call_later`` signature."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class Debouncer:
    """Run ``callback`` once the calls stop for ``delay`` seconds."""

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Any],
        scheduler: Scheduler | None = None,
    ) -> None:
        self.delay = delay
        self.scheduler = scheduler
        self._callback = callback
        self._pending: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self) -> None:
        self.cancel()
        scheduler = self.scheduler or asyncio.get_running_loop()
        self._pending = scheduler.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._pending = None
        self._callback()

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


class EventBinder:
    """Attach a collector to a window and a document event source.

    Parameters
    ----------
    provider:
        Host the snapshots are read from.
    state:
        Store the snapshots and interaction records go to.
    debounce_seconds:
        Scroll quiet period; defaults to ``ENVSNAP_SCROLL_DEBOUNCE_MS``.
    scheduler:
        Timer source for the scroll debounce; defaults to the loop running
        at :meth:`bind` time.

    Attributes
    ----------
    last_error : CollectionError | None
        Failure of the most recent triggered collection, cleared on success.
    """

    def __init__(
        self,
        provider: EnvironmentProvider,
        state: CollectorState,
        debounce_seconds: float | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.provider = provider
        self.state = state
        if debounce_seconds is None:
            debounce_seconds = load_settings().scroll_debounce_seconds
        self.scroll_debouncer = Debouncer(
            debounce_seconds, lambda: self.trigger("scroll"), scheduler
        )
        self._bindings: list[tuple[EventSource, str, Listener, bool]] = []
        self.last_error: CollectionError | None = None

    @property
    def bound(self) -> bool:
        return bool(self._bindings)

    # ------------------------------- Triggers -------------------------------

    def trigger(self, label: str) -> Result[Snapshot, CollectionError]:
        """Collect a snapshot labeled ``label``; log instead of raising on failure.

        Reader failures come back as ``Err``. A subscriber raising is caught
        too and reported as a ``"subscriber"`` :class:`CollectionError`, so the
        event source goes on to its remaining listeners.
        """
        if label not in TRIGGERS:
            raise ValueError(f"Unknown trigger {label!r}; expected one of {sorted(TRIGGERS)}")
        try:
            result = try_collect(self.provider, self.state, label)
        except Exception as exc:
            result = err(CollectionError(label, "subscriber", exc))
        if result.is_err():
            self.last_error = result.unwrap_err()
            logger.warning(
                "collection for '%s' failed: %s",
                label,
                self.last_error,
                exc_info=self.last_error.cause,
            )
        else:
            self.last_error = None
        return result

    def record_interaction(self, event: HostEvent) -> InteractionRecord:
        record = InteractionRecord(
            type=event.type,
            tag=event.tag or None,
            time=collected_time(self.provider),
        )
        self.state.record(record)
        return record

    # ------------------------------- Handlers -------------------------------

    def _on_load(self, event: HostEvent) -> None:
        self.trigger("load")

    def _on_interaction(self, event: HostEvent) -> None:
        self.record_interaction(event)
        self.trigger(event.type)

    def _on_scroll(self, event: HostEvent) -> None:
        self.scroll_debouncer()

    def _on_visibility(self, event: HostEvent) -> None:
        self.trigger("visibilitychange")

    # ------------------------------- Binding --------------------------------

    def _listen(
        self, source: EventSource, type: str, listener: Listener, capture: bool = False
    ) -> None:
        source.add_event_listener(type, listener, capture)
        self._bindings.append((source, type, listener, capture))

    def bind(self, window: EventSource | None, document: EventSource | None) -> bool:
        """Register all listeners once; return False when either source is missing.

        Without an explicit scheduler the scroll debounce is pinned to the
        running asyncio loop here, so binding outside a loop raises
        :class:`RuntimeError` before any listener is registered.
        """
        if window is None or document is None:
            logger.debug("no window/document event sources; event binding skipped")
            return False
        if self.bound:
            return True
        if self.scroll_debouncer.scheduler is None:
            try:
                self.scroll_debouncer.scheduler = asyncio.get_running_loop()
            except RuntimeError:
                raise RuntimeError(
                    "binding events needs a running asyncio loop or an explicit scheduler"
                ) from None

        self._listen(window, "load", self._on_load)
        for type in INTERACTION_EVENTS:
            self._listen(document, type, self._on_interaction, capture=True)
        self._listen(window, "scroll", self._on_scroll)
        self._listen(document, "visibilitychange", self._on_visibility)
        return True

    def unbind(self) -> None:
        """Detach every listener and drop a pending scroll collection."""
        for source, type, listener, capture in self._bindings:
            source.remove_event_listener(type, listener, capture)
        self._bindings.clear()
        self.scroll_debouncer.cancel()


__all__ = ["EventBinder", "Debouncer", "Scheduler", "TimerHandle", "INTERACTION_EVENTS"]
