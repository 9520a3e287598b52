"""
Shared helpers.
"""
import logging
import sys

import numpy as np

from heartrisk.config import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root = logging.getLogger("heartrisk")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if settings.debug else settings.log_level.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the shared heartrisk handler."""
    _configure_root()
    return logging.getLogger(name)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values, unlike round()."""
    return int(np.floor(value + 0.5))
