"""Logging configuration for Asset Valuator.

Log lines go to stdout as ``<time> [<LEVEL>] <logger>: <message>``.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "asset_valuator.stdout"

# Chatty at DEBUG: every ledger request and every event loop tick
QUIET_LOGGERS = ("urllib3", "asyncio")


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "src.asset_valuator",
) -> logging.Logger:
    """Attach the stdout handler to ``module_name`` and set its level.

    Calling again reuses the handler and only changes the level, so a later
    ``--verbose`` still takes effect. Third-party loggers in QUIET_LOGGERS
    stay at WARNING or above.
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if h.name == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
