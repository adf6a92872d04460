"""Host log levels mapped onto the standard ``logging`` module.

The host categorises lines as FATAL, ERR, WARN, INFO, VERB and DBG.  All but
VERB have a stdlib equivalent; VERB sits between INFO and DEBUG.
"""

from __future__ import annotations

import logging

VERBOSE = 15

HOST_LEVEL_NAMES: dict[int, str] = {
    logging.CRITICAL: "FATAL",
    logging.ERROR: "ERR",
    logging.WARNING: "WARN",
    logging.INFO: "INFO",
    VERBOSE: "VERB",
    logging.DEBUG: "DBG",
}


def install_level_names() -> None:
    """Register the host's level names with ``logging``.

    Idempotent.  Only the printed names change; numeric levels are the
    stdlib ones, so ``logger.error`` still emits an ``ERR`` line.
    """
    for level, name in HOST_LEVEL_NAMES.items():
        logging.addLevelName(level, name)
