"""
Snapshot aggregator: run every field reader and publish the result.

Flow
----
1. Validate the trigger label.
2. Invoke each reader in :data:`~envsnap.collector.readers.READERS` against
   the provider. Readers are independent, so their order is not observable.
3. Stamp the sections with the trigger and the host clock (epoch ms).
4. Store the snapshot as latest, then call every subscriber synchronously in
   subscription order.

Failure path
------------
A reader or the host clock raising aborts the collection before step 4: the
previous snapshot stays current and no subscriber is called. The exception
surfaces as a :class:`CollectionError`; :func:`try_collect` returns it as
``Err`` instead.

A subscriber raising happens after the snapshot is stored; it propagates out
of :func:`collect_all` unwrapped and the remaining subscribers are skipped.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from envsnap.collector.readers import READERS
from envsnap.collector.state import CollectorState
from envsnap.core.contracts.snapshot import TRIGGERS, Snapshot
from envsnap.core.host import EnvironmentProvider
from envsnap.core.result import Result, err, ok
from envsnap.core.settings import get_logger, load_settings

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

logger = get_logger("envsnap.collector")


class CollectionError(RuntimeError):
    """A field reader failed while building a snapshot.

    Attributes
    ----------
    trigger : str
        Label of the collection that failed.
    section : str
        Name of the reader that raised (e.g. ``"url_details"``), or ``"clock"``
        when the host clock itself could not be read.
    """

    def __init__(self, trigger: str, section: str, cause: BaseException) -> None:
        super().__init__(f"{section} failed during '{trigger}' collection: {cause}")
        self.trigger = trigger
        self.section = section
        self.cause = cause


def collected_time(provider: EnvironmentProvider) -> int:
    """Return the host clock as epoch milliseconds."""
    return (provider.now() - _EPOCH) // timedelta(milliseconds=1)


def build_snapshot(provider: EnvironmentProvider, trigger: str = "manual") -> Snapshot:
    """Read every section and compose a :class:`Snapshot` without publishing it."""
    if trigger not in TRIGGERS:
        raise ValueError(f"Unknown trigger {trigger!r}; expected one of {sorted(TRIGGERS)}")

    try:
        collected_at = collected_time(provider)
    except Exception as exc:
        raise CollectionError(trigger, "clock", exc) from exc

    sections: dict[str, Any] = {}
    for name, reader in READERS.items():
        try:
            sections[name] = reader(provider)
        except Exception as exc:
            raise CollectionError(trigger, name, exc) from exc

    return Snapshot(trigger=trigger, collected_at=collected_at, **sections)


def collect_all(
    provider: EnvironmentProvider,
    state: CollectorState,
    trigger: str = "manual",
) -> Snapshot:
    """Build a snapshot, make it the latest one and notify subscribers.

    Raises
    ------
    CollectionError
        If any reader fails. ``state`` is left untouched in that case.
    ValueError
        If ``trigger`` is not a known label.
    """
    snapshot = build_snapshot(provider, trigger)

    state.store(snapshot)
    for fn in state.subscribers():
        fn(snapshot)

    if load_settings().log_snapshots and logger.isEnabledFor(logging.DEBUG):
        logger.debug("triggered events: %s", json.dumps(snapshot.to_payload(), sort_keys=True))

    return snapshot


def try_collect(
    provider: EnvironmentProvider,
    state: CollectorState,
    trigger: str = "manual",
) -> Result[Snapshot, CollectionError]:
    """Like :func:`collect_all`, but return reader failures as ``Err``."""
    try:
        return ok(collect_all(provider, state, trigger))
    except CollectionError as exc:
        return err(exc)


__all__ = ["CollectionError", "build_snapshot", "collect_all", "try_collect", "collected_time"]
