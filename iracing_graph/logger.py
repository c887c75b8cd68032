"""Logging helpers.

``LoggerService`` wraps a stdlib logger behind the small
``log(level, message, metadata)`` / ``error(err, context)`` interface the
DAOs and the sync runner are written against.
"""

import json
import logging
from typing import Any, Dict, Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Collaborator level names -> stdlib levels
LEVELS = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"


def configure_logging(level: str = "info") -> None:
    """Install a stream handler on the package logger.

    Args:
        level: One of the names in ``LEVELS``; unknown names mean ``info``.
    """
    root = logging.getLogger("iracing_graph")
    root.setLevel(LEVELS.get(level.lower(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)


class LoggerService:
    """Level/message/metadata logger used by the persistence layer."""

    def __init__(self, name: str = "iracing_graph"):
        self._logger = logging.getLogger(name)

    def log(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log a message at a named level.

        Args:
            level: fatal, error, warn, info, debug or trace
            message: Human readable message
            metadata: Optional structured context, rendered as JSON
        """
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        if metadata:
            self._logger.log(
                LEVELS[level], "%s %s", message, json.dumps(metadata, default=str)
            )
        else:
            self._logger.log(LEVELS[level], "%s", message)

    def error(self, err: BaseException, context: Optional[str] = None) -> None:
        """Log an exception with its traceback.

        Args:
            err: The exception that was caught
            context: What was being attempted; defaults to the error text
        """
        message = f"{context}: {err}" if context else str(err)
        self._logger.error(message, exc_info=(type(err), err, err.__traceback__))
