"""envsnap: client-environment snapshot collector.

Collects navigator, document, location, screen and locale state from an
injected host provider whenever a trigger event fires, keeps the latest
snapshot in memory and notifies subscribers.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
