"""
Utility helpers for configuring and accessing runner-wide logging.

Every run-log entry is mirrored through the standard logging machinery so the
console shows the same chronology that ends up in the HTML report. Records are
tagged with the step that produced them; records emitted outside a step carry
a ``-`` placeholder so the format string never breaks.
"""

from __future__ import annotations

import logging
import sys
from typing import Literal, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(step)s | %(message)s"
LOG_DATEfmt = "%Y-%m-%d %H:%M:%S"


class StepContextFilter(logging.Filter):
    """
    Inject a `step` attribute so that log records are stable even when they
    are emitted during initialization, reporting or cleanup.
    """

    def __init__(self, default_step: str = "-") -> None:
        super().__init__()
        self._default_step = default_step

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if not hasattr(record, "step"):
            record.step = self._default_step
        return True


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    stream: Optional[logging.Handler] = None,
) -> None:
    """
    Configure the root logger with structured formatting.

    Args:
        level: Minimum severity to emit.
        stream: Optional handler; defaults to stderr if omitted.
    """
    logging.captureWarnings(True)

    handler = stream or logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEfmt)
    handler.setFormatter(formatter)
    handler.addFilter(StepContextFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """
    Retrieve a module-specific logger that inherits the global configuration.

    Example:
        logger = get_logger(__name__)
        logger.info("Option clicked", extra={"step": "step3"})
    """
    return logging.getLogger(name)
