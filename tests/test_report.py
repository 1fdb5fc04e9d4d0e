from datetime import datetime

from quiz_e2e.outcomes import RunOutcome
from quiz_e2e.report import (
    overall_status,
    render_html_report,
    render_text_log,
    report_filenames,
    write_reports,
)

MOMENT = datetime(2024, 5, 17, 14, 30, 5)
ENTRIES = ["[14:29:58] Navigating to: file:///quiz", "[14:30:01] Option 1: <a> & <link>"]


def _passing_outcome() -> RunOutcome:
    outcome = RunOutcome()
    for step in outcome.steps:
        step.mark_passed(None, 1.5)
    return outcome


def test_filenames_use_second_resolution_timestamp():
    assert report_filenames(MOMENT) == (
        "Quiz_Test_Report_20240517_143005.html",
        "test_execution_logs_20240517_143005.txt",
    )


def test_overall_status_reflects_outcomes():
    assert overall_status(_passing_outcome()) == ("success-badge", "ALL TESTS PASSED")

    outcome = RunOutcome()
    outcome.step(1).mark_passed(None, 0.1)
    outcome.step(2).mark_failed("timeout", 20.0)
    assert overall_status(outcome) == ("failure-badge", "FAILED AT STEP 2")

    aborted = RunOutcome(error="Browser initialization failed")
    assert overall_status(aborted) == ("failure-badge", "RUN ABORTED")


def test_html_report_renders_real_step_statuses_and_escapes_logs():
    outcome = RunOutcome()
    outcome.step(1).mark_passed(None, 0.4)
    outcome.step(2).mark_failed("Timeout 20000ms exceeded", 20.0)

    document = render_html_report(
        outcome, ENTRIES, screenshot_dir="test-screenshots", generated_at=MOMENT
    )

    assert document.startswith("<!DOCTYPE html>")
    assert document.rstrip().endswith("</html>")
    assert "ALL TESTS PASSED" not in document
    assert "<td class='pass'>PASSED</td>" in document
    assert "<td class='fail'>FAILED</td>" in document
    assert document.count("<td class='not-run'>NOT RUN</td>") == 3
    assert "Failed to start quiz: Timeout 20000ms exceeded" in document
    assert "<span class='log-timestamp'>[14:30:01]</span>" in document
    assert "Option 1: &lt;a&gt; &amp; &lt;link&gt;" in document
    assert "Screenshots saved in: test-screenshots" in document
    assert "2024-05-17 14:30:05" in document


def test_text_log_has_header_entries_and_footer():
    text = render_text_log(ENTRIES, screenshots_taken=4, generated_at=MOMENT)
    lines = text.splitlines()

    assert lines[0] == "QUIZ AUTOMATION TEST EXECUTION LOG"
    assert ENTRIES[0] in lines
    assert ENTRIES[1] in lines
    assert "Total Log Entries: 2" in lines
    assert lines[-1] == "Screenshots Taken: 4"


def test_write_reports_creates_both_files(tmp_path):
    paths = write_reports(
        _passing_outcome(),
        ENTRIES,
        report_dir=tmp_path / "out",
        screenshot_dir=tmp_path / "shots",
        screenshots_taken=16,
        generated_at=MOMENT,
    )

    assert paths.html_path == tmp_path / "out" / "Quiz_Test_Report_20240517_143005.html"
    assert paths.log_path == tmp_path / "out" / "test_execution_logs_20240517_143005.txt"
    assert "ALL TESTS PASSED" in paths.html_path.read_text(encoding="utf-8")
    assert "Screenshots Taken: 16" in paths.log_path.read_text(encoding="utf-8")


def test_write_failures_are_logged_not_raised(tmp_path, caplog):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied", encoding="utf-8")

    paths = write_reports(
        RunOutcome(),
        ENTRIES,
        report_dir=blocker,
        screenshot_dir=tmp_path,
        screenshots_taken=0,
        generated_at=MOMENT,
    )

    assert paths.html_path is None
    assert paths.log_path is None
    assert "Failed to generate test report" in caplog.text
    assert "Failed to save execution logs" in caplog.text
