"""
Logging
=======

    from bethyw.logger import setup_logging, get_logger
    setup_logging("INFO")
    logger = get_logger(__name__)

Log records go to stderr; stdout is kept for the tables / JSON output.
"""

import logging
import sys
from typing import Optional

from .config import get_settings

PACKAGE = "bethyw"


def setup_logging(level: Optional[str] = None) -> None:
    """Call once at startup. `level` defaults to Settings.LOG_LEVEL."""
    name = (level or get_settings().LOG_LEVEL).upper()
    lvl = getattr(logging, name, None)
    if not isinstance(lvl, int):
        lvl = logging.WARNING

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s [%(name)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    pkg = logging.getLogger(PACKAGE)
    pkg.setLevel(lvl)
    pkg.handlers.clear()

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    pkg.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    """Per-module logger; use get_logger(__name__)."""
    return logging.getLogger(name)
