"""Core package initializer for envsnap.

Holds the settings, the host abstraction, the result container and the
pydantic contracts. Import from the submodules directly:
    from envsnap.core.settings import settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
