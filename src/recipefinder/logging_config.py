"""Helpers for configuring consistent logging output."""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_CONFIGURED = False

LOG_LEVEL_ENV = "RECIPEFINDER_LOG_LEVEL"


def _resolve_level(level: Union[str, int, None]) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        normalized = str(level).strip().upper()
        return getattr(logging, normalized, logging.INFO)


def configure_logging(level: Optional[Union[str, int]] = None, *, force: bool = False) -> int:
    """Install the root handler once and return the effective level.

    The level comes from ``level``, then ``RECIPEFINDER_LOG_LEVEL``, then
    defaults to ``INFO``.
    """
    global _CONFIGURED

    resolved_level = _resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    if _CONFIGURED and not force:
        return resolved_level

    logging.basicConfig(level=resolved_level, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger("recipefinder").setLevel(resolved_level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(resolved_level, logging.WARNING))
    _CONFIGURED = True
    return resolved_level


__all__ = ["configure_logging", "LOG_LEVEL_ENV"]
