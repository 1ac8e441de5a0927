"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only wires the root handler.
"""

from __future__ import annotations

import logging
import sys

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.log_level()).upper()
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "INFO"
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level_name)
    logging.getLogger().setLevel(level_name)
