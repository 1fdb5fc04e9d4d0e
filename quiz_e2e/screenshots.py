from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Protocol

from quiz_e2e.logging_utils import get_logger
from quiz_e2e.run_log import RunLog

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


class Screenshotter(Protocol):
    def screenshot(self, path: Path) -> None: ...


def sanitize_description(description: str) -> str:
    return _UNSAFE_CHARS.sub("_", description)


def screenshot_filename(sequence: int, description: str) -> str:
    """Return ``NN_description.png`` with every non-alphanumeric character replaced."""
    return f"{sequence:02d}_{sanitize_description(description)}.png"


class ScreenshotRecorder:
    """
    Names and stores screenshots in capture order.

    The counter advances on every capture call, including failed ones, so file
    numbers always reflect the order in which captures were requested.
    """

    def __init__(self, directory: Path | str, run_log: RunLog) -> None:
        self.directory = Path(directory)
        self.run_log = run_log
        self._next_sequence = 1
        if not self.directory.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            run_log.info(f"Created directory: {self.directory}")

    @property
    def taken(self) -> int:
        """Number of capture calls made so far."""
        return self._next_sequence - 1

    def capture(
        self,
        target: Optional[Screenshotter],
        description: str,
        *,
        step: Optional[str] = None,
    ) -> Optional[Path]:
        filename = screenshot_filename(self._next_sequence, description)
        self._next_sequence += 1
        if target is None:
            self.run_log.warning(f"Screenshot skipped (no page): {filename}", step=step)
            return None

        destination = self.directory / filename
        try:
            target.screenshot(destination)
        except Exception as exc:
            self.run_log.warning(f"Screenshot failed: {exc}", step=step)
            return None

        self.run_log.info(f"Screenshot captured: {filename}", step=step)
        return destination
