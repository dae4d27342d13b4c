"""Collector entry points for envsnap.

Currently exposed:

- :class:`ClientDataCollector` / :func:`create_collector`, implemented in
  ``facade.py``.
- :class:`CollectionError`, raised when a field reader fails.
"""

from __future__ import annotations

from .aggregator import CollectionError
from .facade import ClientDataCollector, create_collector

__all__ = ["ClientDataCollector", "CollectionError", "create_collector"]
