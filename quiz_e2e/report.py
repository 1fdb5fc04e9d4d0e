"""
HTML report and plain-text log writers.

Both artifacts are named with a second-resolution timestamp
(``Quiz_Test_Report_<yyyyMMdd_HHmmss>.html`` and
``test_execution_logs_<yyyyMMdd_HHmmss>.txt``). The HTML summary table and the
overall badge are rendered from the run's step outcomes; log lines are
HTML-escaped before embedding.
"""

from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from quiz_e2e.logging_utils import get_logger
from quiz_e2e.outcomes import RunOutcome, StepOutcome, StepStatus
from quiz_e2e.run_log import split_entry

logger = get_logger(__name__)

FILE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
DISPLAY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
REPORT_PREFIX = "Quiz_Test_Report_"
LOG_PREFIX = "test_execution_logs_"
TEST_ENVIRONMENT = "Playwright + Chromium"
BROWSER_NAME = "Chromium"

REPORT_STYLES = """
body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 0; padding: 20px; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); min-height: 100vh; }
.container { max-width: 1200px; margin: 0 auto; background: white; padding: 30px; border-radius: 15px; box-shadow: 0 20px 40px rgba(0,0,0,0.1); }
h1 { color: #2c3e50; text-align: center; margin-bottom: 30px; }
h2 { color: #34495e; border-bottom: 2px solid #3498db; padding-bottom: 10px; }
.test-summary { background: #f8f9fa; padding: 20px; border-radius: 10px; margin: 20px 0; }
.pass { color: #27ae60; font-weight: bold; }
.fail { color: #e74c3c; font-weight: bold; }
.not-run { color: #7f8c8d; font-weight: bold; }
table { width: 100%; border-collapse: collapse; margin: 20px 0; background: white; }
th, td { border: 1px solid #ddd; padding: 15px; text-align: left; }
th { background: #2980b9; color: white; font-weight: bold; }
tr:nth-child(even) { background: #f8f9fa; }
.log-container { max-height: 500px; overflow-y: auto; background: #f8fafc; padding: 20px; border: 2px solid #e2e8f0; border-radius: 10px; margin: 20px 0; }
.log-entry { font-family: 'Courier New', monospace; font-size: 14px; padding: 8px; border-bottom: 1px solid #e2e8f0; line-height: 1.4; }
.log-timestamp { color: #64748b; font-weight: bold; }
.success-badge { background: #d5f4e6; color: #27ae60; padding: 5px 10px; border-radius: 20px; font-size: 12px; font-weight: bold; }
.failure-badge { background: #fadbd8; color: #e74c3c; padding: 5px 10px; border-radius: 20px; font-size: 12px; font-weight: bold; }
.footer { text-align: center; margin-top: 30px; padding: 20px; background: #f8f9fa; border-radius: 10px; }
"""

_STATUS_CELLS = {
    StepStatus.PASSED: ("pass", "PASSED"),
    StepStatus.FAILED: ("fail", "FAILED"),
    StepStatus.NOT_RUN: ("not-run", "NOT RUN"),
}


@dataclass(slots=True)
class ReportPaths:
    """Locations of the artifacts written by ``write_reports``."""

    html_path: Optional[Path] = None
    log_path: Optional[Path] = None


def report_filenames(generated_at: datetime) -> tuple[str, str]:
    stamp = generated_at.strftime(FILE_TIMESTAMP_FORMAT)
    return f"{REPORT_PREFIX}{stamp}.html", f"{LOG_PREFIX}{stamp}.txt"


def overall_status(outcome: RunOutcome) -> tuple[str, str]:
    """Return the badge CSS class and label for the run."""
    if outcome.passed:
        return "success-badge", "ALL TESTS PASSED"
    failed = outcome.failed_step
    if failed is not None:
        return "failure-badge", f"FAILED AT STEP {failed.number}"
    if outcome.error:
        return "failure-badge", "RUN ABORTED"
    return "failure-badge", f"{outcome.passed_count}/{len(outcome.steps)} STEPS PASSED"


def _render_step_row(step: StepOutcome) -> str:
    css_class, label = _STATUS_CELLS[step.status]
    details = step.details or ""
    if step.error:
        details = f"{details}: {step.error}" if details else step.error
    return (
        "<tr>"
        f"<td>{step.number}</td>"
        f"<td>{html.escape(step.title)}</td>"
        f"<td class='{css_class}'>{label}</td>"
        f"<td>{html.escape(details)}</td>"
        f"<td>{step.elapsed_seconds:.2f}s</td>"
        "</tr>"
    )


def _render_log_entry(entry: str) -> str:
    stamp, body = split_entry(entry)
    return (
        "<div class='log-entry'>"
        f"<span class='log-timestamp'>{html.escape(stamp)}</span> {html.escape(body)}"
        "</div>"
    )


def render_html_report(
    outcome: RunOutcome,
    entries: Sequence[str],
    *,
    screenshot_dir: Path | str,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the complete HTML document for a run."""
    moment = generated_at or datetime.now()
    badge_class, badge_label = overall_status(outcome)
    closing = (
        "Test Automation Completed Successfully!"
        if outcome.passed
        else "Test Automation Finished With Failures"
    )

    rows = "".join(_render_step_row(step) for step in outcome.steps)
    logs = "".join(_render_log_entry(entry) for entry in entries)

    return (
        "<!DOCTYPE html>"
        "<html lang='en'>"
        "<head>"
        "<meta charset='UTF-8'>"
        "<meta name='viewport' content='width=device-width, initial-scale=1.0'>"
        "<title>Quiz Automation Test Report</title>"
        f"<style>{REPORT_STYLES}</style>"
        "</head>"
        "<body>"
        "<div class='container'>"
        "<h1>Quiz Automation Test Report</h1>"
        "<div class='test-summary'>"
        f"<p><strong>Report Generated:</strong> {moment.strftime(DISPLAY_TIMESTAMP_FORMAT)}</p>"
        f"<p><strong>Test Environment:</strong> {TEST_ENVIRONMENT}</p>"
        f"<p><strong>Overall Status:</strong> <span class='{badge_class}'>{badge_label}</span></p>"
        "</div>"
        "<h2>Test Execution Summary</h2>"
        "<table>"
        "<thead>"
        "<tr><th>Step</th><th>Test Description</th><th>Status</th><th>Details</th><th>Duration</th></tr>"
        "</thead>"
        f"<tbody>{rows}</tbody>"
        "</table>"
        "<h2>Detailed Execution Logs</h2>"
        f"<div class='log-container'>{logs}</div>"
        "<div class='footer'>"
        f"<p><strong>{closing}</strong></p>"
        f"<p>Screenshots saved in: {html.escape(str(screenshot_dir))}</p>"
        "</div>"
        "</div>"
        "</body>"
        "</html>"
    )


def render_text_log(
    entries: Sequence[str],
    *,
    screenshots_taken: int,
    generated_at: Optional[datetime] = None,
) -> str:
    moment = generated_at or datetime.now()
    lines = [
        "QUIZ AUTOMATION TEST EXECUTION LOG",
        "================================",
        f"Generated: {moment.isoformat()}",
        f"Test Framework: {TEST_ENVIRONMENT}",
        f"Browser: {BROWSER_NAME}",
        "================================",
        "",
        *entries,
        "",
        "================================",
        "END OF EXECUTION LOG",
        f"Total Log Entries: {len(entries)}",
        f"Screenshots Taken: {screenshots_taken}",
    ]
    return "\n".join(lines) + "\n"


def write_reports(
    outcome: RunOutcome,
    entries: Sequence[str],
    *,
    report_dir: Path | str,
    screenshot_dir: Path | str,
    screenshots_taken: int,
    generated_at: Optional[datetime] = None,
) -> ReportPaths:
    """
    Write the HTML report and the text log into ``report_dir``.

    Each file is written independently; a failure on one is logged and leaves
    the corresponding path as ``None`` without raising.
    """
    moment = generated_at or datetime.now()
    html_name, log_name = report_filenames(moment)
    directory = Path(report_dir)
    paths = ReportPaths()

    # Snapshot so both files describe the same chronology.
    snapshot = list(entries)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        html_path = directory / html_name
        html_path.write_text(
            render_html_report(
                outcome, snapshot, screenshot_dir=screenshot_dir, generated_at=moment
            ),
            encoding="utf-8",
        )
        paths.html_path = html_path
    except OSError as exc:
        logger.error("Failed to generate test report %s: %s", html_name, exc)

    try:
        log_path = directory / log_name
        log_path.write_text(
            render_text_log(
                snapshot, screenshots_taken=screenshots_taken, generated_at=moment
            ),
            encoding="utf-8",
        )
        paths.log_path = log_path
    except OSError as exc:
        logger.error("Failed to save execution logs %s: %s", log_name, exc)

    return paths
