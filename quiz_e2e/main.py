"""
Command-line entry point for the scripted quiz UI test.

Running without arguments executes the canonical sequence against
``webapp/index.html`` in the working directory. The optional flags override
the matching settings for a single invocation.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from quiz_e2e.config import Settings, get_settings
from quiz_e2e.logging_utils import configure_logging, get_logger
from quiz_e2e.runner import QuizTestRunner

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz-e2e",
        description="Drive a browser through the quiz application and write a test report.",
    )
    parser.add_argument("--url", help="Page under test (defaults to webapp/index.html)")
    parser.add_argument(
        "--headless",
        action="store_true",
        default=None,
        help="Run Chromium without a visible window",
    )
    parser.add_argument("--screenshot-dir", type=Path, help="Where screenshots are stored")
    parser.add_argument("--report-dir", type=Path, help="Where report files are written")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log verbosity",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with every explicitly passed flag applied."""
    updates: Dict[str, Any] = {}
    if args.url:
        updates["quiz_url"] = args.url
    if args.headless is not None:
        updates["browser_headless"] = args.headless
    if args.screenshot_dir is not None:
        updates["screenshot_dir"] = args.screenshot_dir
    if args.report_dir is not None:
        updates["report_dir"] = args.report_dir
    if args.log_level:
        updates["log_level"] = args.log_level
    return settings.model_copy(update=updates) if updates else settings


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = apply_overrides(get_settings(), args)
    except RuntimeError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level.upper())  # type: ignore[arg-type]
    outcome = QuizTestRunner(settings=settings).run()
    return 0 if outcome.passed else 1


if __name__ == "__main__":
    sys.exit(main())
