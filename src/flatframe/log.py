"""Logging switch for flatframe.

flatframe logs through ``loguru``. As a library it starts disabled so that
importing it never writes to the application's sinks; turn it on with
``enable_logging()`` or by setting ``FLATFRAME_LOG=1``.
"""

from __future__ import annotations

import os

from loguru import logger

_TRUTHY = ("1", "true", "yes")

# the polars adapter is a separate top-level package, not a flatframe submodule
_PACKAGES = ("flatframe", "flatframe_polars")


def enable_logging() -> None:
    """Route flatframe's log records to the configured loguru sinks."""
    for name in _PACKAGES:
        logger.enable(name)


def disable_logging() -> None:
    for name in _PACKAGES:
        logger.disable(name)


def configure_from_env() -> None:
    """Apply ``FLATFRAME_LOG``; called once at import."""
    if os.environ.get("FLATFRAME_LOG", "").lower() in _TRUTHY:
        enable_logging()
    else:
        disable_logging()
