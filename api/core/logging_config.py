"""
Process-wide logging setup (stdlib `logging`).

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only wires the root handler once.
"""

from __future__ import annotations

import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    resolved = (level or config.log_level()).upper()
    if not isinstance(logging.getLevelName(resolved), int):
        resolved = "INFO"
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
