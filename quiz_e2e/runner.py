from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from quiz_e2e.config import Settings, get_settings
from quiz_e2e.errors import BrowserLaunchError, ElementNotFound, QuizRunError, StepFailure
from quiz_e2e.logging_utils import get_logger
from quiz_e2e.outcomes import AnswerAttempt, RunOutcome, RunState
from quiz_e2e.pages import open_quiz_session
from quiz_e2e.report import ReportPaths, write_reports
from quiz_e2e.run_log import RunLog
from quiz_e2e.screenshots import ScreenshotRecorder

logger = get_logger(__name__)

BANNER_RULE = "=" * 42

LANDING_ELEMENTS = (
    ("landingPage", "Landing Page Container"),
    ("username", "Username Input Field"),
    ("categorySelect", "Category Selection Dropdown"),
    ("difficultySelect", "Difficulty Selection Dropdown"),
    ("startBtn", "Start Quiz Button"),
)
QUIZ_ELEMENTS = (
    ("timer", "Timer Display"),
    ("questionText", "Question Text Area"),
    ("optionsContainer", "Options Container"),
)
RESULT_ELEMENTS = (
    ("totalScore", "Total Score Display"),
    ("correctAnswers", "Correct Answers Count"),
    ("wrongAnswers", "Wrong Answers Count"),
    ("totalTime", "Total Time Display"),
    ("performanceChart", "Performance Chart"),
    ("detailedAnalysis", "Detailed Analysis Section"),
)


class QuizPageDriver(Protocol):
    """Operations the runner needs from the page under test."""

    @property
    def title(self) -> str: ...

    @property
    def url(self) -> str: ...

    def goto(self, url: str) -> None: ...

    def exists(self, element_id: str) -> bool: ...

    def is_visible(self, element_id: str) -> bool: ...

    def is_enabled(self, element_id: str) -> bool: ...

    def wait_for_attached(self, element_id: str) -> None: ...

    def wait_for_visible(self, element_id: str) -> None: ...

    def wait_for_clickable(self, element_id: str) -> None: ...

    def wait_for_text_change(self, element_id: str, previous: str) -> None: ...

    def input_value(self, element_id: str) -> str: ...

    def text(self, element_id: str) -> str: ...

    def fill(self, element_id: str, value: str) -> None: ...

    def select(self, element_id: str, value: str) -> None: ...

    def click(self, element_id: str) -> None: ...

    def option_texts(self) -> List[str]: ...

    def click_option(self, index: int) -> None: ...

    def wait_for_option_selected(self, index: int) -> bool: ...

    def result_item_count(self) -> int: ...

    def result_correctness(self, limit: int) -> List[bool]: ...

    def screenshot(self, path: Path) -> None: ...


class Session(Protocol):
    page: QuizPageDriver

    def close(self) -> None: ...


SessionFactory = Callable[[Settings], Session]


def print_banner(message: str) -> None:
    rule = "*" * 60
    print(f"\n{rule}\n   {message}\n{rule}\n")


class QuizTestRunner:
    """
    Drives the five scripted steps against a single browser session:

    1. Verify the landing page.
    2. Configure and start the quiz.
    3. Answer every question from the answer key.
    4. Submit the quiz.
    5. Verify the results page.

    The first failing step aborts the sequence. The report is still written and
    the session is always closed.
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        session_factory: Optional[SessionFactory] = None,
        run_log: Optional[RunLog] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session_factory = session_factory or open_quiz_session
        self.run_log = run_log or RunLog()
        self.screenshots = ScreenshotRecorder(self.settings.screenshot_dir, self.run_log)
        self.answer_key = self.settings.answer_key
        self.outcome = RunOutcome()
        self.state = RunState.UNINITIALIZED
        self.session: Optional[Session] = None
        self.attempts: List[AnswerAttempt] = []
        self.next_clicks = 0
        self.report_paths: Optional[ReportPaths] = None

    @property
    def page(self) -> QuizPageDriver:
        if self.session is None:
            raise QuizRunError("Browser session has not been initialized")
        return self.session.page

    def _log(self, message: str) -> None:
        self.run_log.info(message, step=self._step_tag())

    def _warn(self, message: str) -> None:
        self.run_log.warning(message, step=self._step_tag())

    def _step_tag(self) -> Optional[str]:
        return self.state.value if self.state.value.startswith("step") else None

    def _section(self, title: str) -> None:
        self._log(BANNER_RULE)
        self._log(title)
        self._log(BANNER_RULE)

    def initialize(self) -> None:
        self._section("QUIZ AUTOMATION TEST INITIALIZATION")
        try:
            self.session = self.session_factory(self.settings)
        except Exception as exc:
            self.run_log.error(f"Browser initialization failed: {exc}")
            raise BrowserLaunchError("Browser initialization failed") from exc
        self.state = RunState.INITIALIZED
        self._log("Chromium session initialized successfully")

    def verify_element_presence(self, element_id: str, description: str) -> None:
        page = self.page
        if not page.exists(element_id):
            self.run_log.error(f"{description} not found (#{element_id})", step=self._step_tag())
            raise ElementNotFound(element_id, description)
        if page.is_visible(element_id):
            self._log(f"{description} is visible")
        else:
            self._warn(f"{description} exists but is not visible")

    def _execute_step(self, number: int, action: Callable[[], Optional[str]]) -> None:
        step = self.outcome.step(number)
        self.state = RunState(f"step{number}")
        self._section(f"STEP {number}: {step.title.upper()}")

        started = time.monotonic()
        try:
            details = action()
        except Exception as exc:
            step.mark_failed(str(exc) or type(exc).__name__, time.monotonic() - started)
            self.run_log.error(f"STEP {number} FAILED: {exc}", step=self._step_tag())
            self.screenshots.capture(
                self.session.page if self.session else None,
                step.definition.error_screenshot,
                step=self._step_tag(),
            )
            raise StepFailure(number, step.definition.failure_message) from exc

        step.mark_passed(details, time.monotonic() - started)
        self._log(f"STEP {number} PASSED - {step.details}")

    def step1_verify_landing_page(self, url: Optional[str] = None) -> None:
        target = url or self.settings.resolved_quiz_url

        def action() -> str:
            page = self.page
            self._log(f"Navigating to: {target}")
            page.goto(target)
            page.wait_for_attached("landingPage")

            self._log("Page loaded successfully")
            self._log(f"Page Title: {page.title}")
            self._log(f"Current URL: {page.url}")

            for element_id, description in LANDING_ELEMENTS:
                self.verify_element_presence(element_id, description)

            default_username = page.input_value("username")
            self._log(f"Default username: {default_username}")

            self.screenshots.capture(page, "landing_page_loaded", step=self._step_tag())
            return "Landing page verified successfully"

        self._execute_step(1, action)

    def step2_start_quiz(self) -> None:
        settings = self.settings

        def action() -> str:
            page = self.page
            page.fill("username", settings.quiz_username)
            self._log(f"Username entered: {settings.quiz_username}")

            page.select("categorySelect", settings.quiz_category)
            self._log(f"Category selected: {settings.quiz_category}")

            page.select("difficultySelect", settings.quiz_difficulty)
            self._log(f"Difficulty selected: {settings.quiz_difficulty}")

            self.screenshots.capture(page, "quiz_settings_configured", step=self._step_tag())

            page.click("startBtn")
            self._log("Start button clicked")
            page.wait_for_visible("quizPage")

            for element_id, description in QUIZ_ELEMENTS:
                self.verify_element_presence(element_id, description)

            first_question = page.text("questionText")
            self._log(f"First question: {first_question}")

            timer_text = page.text("timer")
            self._log(f"Timer started: {timer_text} seconds")
            if not timer_text.isdigit():
                self._warn(f"Timer value is not numeric: {timer_text!r}")

            self.screenshots.capture(page, "quiz_started", step=self._step_tag())
            return (
                f"Quiz started as {settings.quiz_username} "
                f"({settings.quiz_category}/{settings.quiz_difficulty})"
            )

        self._execute_step(2, action)

    def _answer_question(self, question_number: int, answer_index: int) -> AnswerAttempt:
        page = self.page
        page.wait_for_visible("questionText")

        question_text = page.text("questionText")
        self._log(f"Question: {question_text}")

        options = page.option_texts()
        self._log(f"Number of options: {len(options)}")
        for position, option_text in enumerate(options):
            self._log(f"   Option {position}: {option_text}")

        attempt = AnswerAttempt(
            question_number=question_number,
            answer_index=answer_index,
            option_count=len(options),
            question_text=question_text,
        )

        if answer_index >= len(options):
            attempt.skipped = True
            self._warn(
                f"Answer index {answer_index} out of bounds for {len(options)} options; "
                f"skipping question {question_number}"
            )
            return attempt

        attempt.selected_text = options[answer_index]
        page.click_option(answer_index)
        self._log(f"Selected answer: Option {answer_index} - {attempt.selected_text}")

        attempt.confirmed = page.wait_for_option_selected(answer_index)
        if attempt.confirmed:
            self._log("Selection confirmed visually")
        else:
            self._warn("Selection marker not observed on the clicked option")

        self.screenshots.capture(
            page, f"question_{question_number}_answered", step=self._step_tag()
        )
        return attempt

    def step3_answer_questions(self) -> None:
        answer_key = self.answer_key

        def action() -> str:
            page = self.page
            total = len(answer_key)
            for question_number, answer_index in enumerate(answer_key, start=1):
                self._log(f"--- Question {question_number} ---")
                attempt = self._answer_question(question_number, answer_index)
                self.attempts.append(attempt)

                if question_number < total:
                    page.click("nextBtn")
                    self.next_clicks += 1
                    self._log("Navigated to next question")
                    page.wait_for_text_change("questionText", attempt.question_text)

            skipped = sum(1 for attempt in self.attempts if attempt.skipped)
            if skipped:
                return f"{total - skipped} of {total} questions answered, {skipped} skipped"
            return f"All {total} questions answered successfully"

        self._execute_step(3, action)

    def step4_submit_quiz(self) -> None:
        def action() -> str:
            page = self.page
            page.wait_for_clickable("submitBtn")
            self.screenshots.capture(page, "before_submission", step=self._step_tag())

            page.click("submitBtn")
            self._log("Submit button clicked")

            page.wait_for_visible("resultsPage")
            self._log("Results page loaded successfully")

            for element_id, description in RESULT_ELEMENTS:
                self.verify_element_presence(element_id, description)

            self.screenshots.capture(page, "results_page_loaded", step=self._step_tag())
            return "Quiz submitted successfully"

        self._execute_step(4, action)

    def step5_verify_results(self) -> None:
        limit = self.settings.result_preview_limit

        def action() -> str:
            page = self.page
            page.wait_for_visible("totalScore")

            total_score = page.text("totalScore")
            correct = page.text("correctAnswers")
            wrong = page.text("wrongAnswers")
            total_time = page.text("totalTime")

            self._log("=== QUIZ RESULTS ===")
            self._log(f"Total Score: {total_score}")
            self._log(f"Correct Answers: {correct}")
            self._log(f"Wrong Answers: {wrong}")
            self._log(f"Total Time: {total_time}")

            item_count = page.result_item_count()
            self._log(f"Detailed analysis contains {item_count} result items")
            for position, is_correct in enumerate(
                page.result_correctness(min(item_count, limit)), start=1
            ):
                self._log(f"   Question {position}: {'Correct' if is_correct else 'Incorrect'}")

            if page.is_visible("performanceChart"):
                self._log("Performance chart is displayed")
            else:
                self._warn("Performance chart is not displayed")

            if page.is_visible("restartBtn") and page.is_enabled("restartBtn"):
                self._log("Restart button is available")
            else:
                self._warn("Restart button is not available")

            self.screenshots.capture(page, "final_results_displayed", step=self._step_tag())
            return f"Score {total_score} ({correct} correct, {wrong} wrong, {total_time})"

        self._execute_step(5, action)

    def generate_report(self) -> ReportPaths:
        """Write the HTML report and the text log; never raises on I/O errors."""
        self.state = RunState.REPORT_GENERATED
        paths = write_reports(
            self.outcome,
            self.run_log.entries,
            report_dir=self.settings.report_dir,
            screenshot_dir=self.settings.screenshot_dir,
            screenshots_taken=self.screenshots.taken,
        )
        if paths.html_path is not None:
            self._log(f"Test report generated: {paths.html_path}")
        else:
            self.run_log.error("Failed to generate test report")
        if paths.log_path is not None:
            self._log(f"Execution logs saved: {paths.log_path}")
        else:
            self.run_log.error("Failed to save execution logs")
        self.report_paths = paths
        return paths

    def cleanup(self) -> None:
        if self.session is not None:
            try:
                self.session.close()
                self._log("Browser session closed successfully")
            except Exception as exc:
                self.run_log.warning(f"Error closing browser session: {exc}")
            finally:
                self.session = None
        self.state = RunState.CLOSED

    def run(self) -> RunOutcome:
        print_banner(self.settings.app_name.upper())
        try:
            self.initialize()
            self._log(f"Target URL: {self.settings.resolved_quiz_url}")
            self.step1_verify_landing_page()
            self.step2_start_quiz()
            self.step3_answer_questions()
            self.step4_submit_quiz()
            self.step5_verify_results()
            print_banner("ALL TESTS COMPLETED SUCCESSFULLY")
        except QuizRunError as exc:
            print_banner("TEST EXECUTION FAILED")
            self.outcome.error = str(exc)
            self.run_log.error(f"Critical Error: {exc}")
            logger.exception("Quiz run aborted")
        finally:
            self.outcome.finished_at = datetime.now()
            try:
                self.generate_report()
            finally:
                self.cleanup()
        return self.outcome
