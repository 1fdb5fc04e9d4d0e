"""
Chronological run log shared by the runner, the screenshot recorder and the
report writer.

Entries are plain strings of the form ``[HH:MM:SS] message``. They are kept in
memory for the whole run, mirrored to the console through ``logging`` as they
are added, and serialized verbatim into the text log and the HTML report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from quiz_e2e.logging_utils import get_logger

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%H:%M:%S"


@dataclass(slots=True)
class RunLog:
    """Append-only list of timestamped log lines."""

    clock: Callable[[], datetime] = datetime.now
    entries: List[str] = field(default_factory=list)

    def add(
        self,
        message: str,
        *,
        level: int = logging.INFO,
        step: Optional[str] = None,
    ) -> str:
        """Append ``message`` and mirror it to the console; return the stored entry."""
        entry = f"[{self.clock().strftime(TIMESTAMP_FORMAT)}] {message}"
        self.entries.append(entry)
        logger.log(level, message, extra={"step": step or "-"})
        return entry

    def info(self, message: str, *, step: Optional[str] = None) -> str:
        return self.add(message, level=logging.INFO, step=step)

    def warning(self, message: str, *, step: Optional[str] = None) -> str:
        return self.add(message, level=logging.WARNING, step=step)

    def error(self, message: str, *, step: Optional[str] = None) -> str:
        return self.add(message, level=logging.ERROR, step=step)

    def contains(self, fragment: str) -> bool:
        return any(fragment in entry for entry in self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def split_entry(entry: str) -> tuple[str, str]:
    """Split an entry into its ``[HH:MM:SS]`` prefix and the message body."""
    if entry.startswith("[") and "] " in entry:
        stamp, _, body = entry.partition("] ")
        return f"{stamp}]", body
    return "", entry
