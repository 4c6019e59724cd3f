"""Environment-driven settings."""

from __future__ import annotations

import logging
import os

from physgraph.version import __version__

ENGINE_VERSION = os.getenv("PHYSGRAPH_ENGINE_VERSION", __version__)

DEFAULT_MAX_DEPTH = 64
MAX_DEPTH_CEILING = 100


def max_nesting_depth() -> int:
    """Return the configured ceiling on parenthesis/brace/fraction nesting."""

    raw = os.getenv("PHYSGRAPH_MAX_DEPTH")
    if not raw:
        return DEFAULT_MAX_DEPTH
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_DEPTH
    return min(max(1, value), MAX_DEPTH_CEILING)


def log_level() -> int:
    name = os.getenv("PHYSGRAPH_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int | None = None) -> None:
    logging.basicConfig(
        level=level if level is not None else log_level(),
        format="[%(levelname)s] %(message)s",
    )


__all__ = [
    "ENGINE_VERSION",
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_CEILING",
    "max_nesting_depth",
    "log_level",
    "configure_logging",
]
