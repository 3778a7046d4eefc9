"""
Logging setup for ReplyQ.

One stream handler on the `replyq` logger tree, level from REPLYQ_LOG_LEVEL.
HTTP client loggers are held at WARNING: at DEBUG they print full request
URLs, and Gmail URLs carry message and thread ids.
"""

from __future__ import annotations

import logging
import os
from typing import Final

_ROOT_LOGGER: Final[str] = "replyq"
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_QUIET_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "google.auth", "google.api_core")

_configured: bool = False


def _resolve_level() -> int:
    level_name = os.getenv("REPLYQ_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _configure() -> None:
    global _configured

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    package_logger = logging.getLogger(_ROOT_LOGGER)
    package_logger.addHandler(handler)
    package_logger.propagate = False

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the `replyq` tree.

    Names outside the package (e.g. `__main__`) are nested under it so they
    share the handler.
    """
    if not _configured:
        _configure()

    if name != _ROOT_LOGGER and not name.startswith(_ROOT_LOGGER + "."):
        name = f"{_ROOT_LOGGER}.{name}"

    logging.getLogger(_ROOT_LOGGER).setLevel(_resolve_level())
    return logging.getLogger(name)
