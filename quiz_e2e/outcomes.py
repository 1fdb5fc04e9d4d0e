"""
Structured records describing how a quiz run went.

The report is rendered from these records, so the overall verdict and every
per-step row reflect what actually happened rather than a fixed template.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class StepStatus(str, Enum):
    NOT_RUN = "not_run"
    PASSED = "passed"
    FAILED = "failed"


class RunState(str, Enum):
    """Linear lifecycle of a runner instance."""

    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    STEP1 = "step1"
    STEP2 = "step2"
    STEP3 = "step3"
    STEP4 = "step4"
    STEP5 = "step5"
    REPORT_GENERATED = "report_generated"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class StepDefinition:
    number: int
    title: str
    success_detail: str
    failure_message: str
    error_screenshot: str


STEP_DEFINITIONS: tuple[StepDefinition, ...] = (
    StepDefinition(
        1,
        "Verify Landing Page",
        "All landing page elements verified",
        "Landing page verification failed",
        "error_landing_page",
    ),
    StepDefinition(
        2,
        "Start Quiz",
        "Quiz started with selected settings",
        "Failed to start quiz",
        "error_starting_quiz",
    ),
    StepDefinition(
        3,
        "Answer Questions",
        "All questions answered successfully",
        "Failed to answer questions",
        "error_answering_questions",
    ),
    StepDefinition(
        4,
        "Submit Quiz",
        "Quiz submitted and results page loaded",
        "Failed to submit quiz",
        "error_submitting_quiz",
    ),
    StepDefinition(
        5,
        "Verify Results",
        "Results and analysis verified",
        "Failed to verify results",
        "error_verifying_results",
    ),
)


@dataclass(slots=True)
class StepOutcome:
    """Result of a single scripted step."""

    definition: StepDefinition
    status: StepStatus = StepStatus.NOT_RUN
    details: Optional[str] = None
    error: Optional[str] = None
    elapsed_seconds: float = 0.0

    @property
    def number(self) -> int:
        return self.definition.number

    @property
    def title(self) -> str:
        return self.definition.title

    def mark_passed(self, details: Optional[str], elapsed_seconds: float) -> None:
        self.status = StepStatus.PASSED
        self.details = details or self.definition.success_detail
        self.error = None
        self.elapsed_seconds = elapsed_seconds

    def mark_failed(self, error: str, elapsed_seconds: float) -> None:
        self.status = StepStatus.FAILED
        self.details = self.definition.failure_message
        self.error = error
        self.elapsed_seconds = elapsed_seconds


@dataclass(slots=True)
class AnswerAttempt:
    """What happened for one entry of the answer key."""

    question_number: int
    answer_index: int
    option_count: int
    question_text: str = ""
    selected_text: Optional[str] = None
    skipped: bool = False
    confirmed: bool = False


@dataclass(slots=True)
class RunOutcome:
    """Top-level record covering every step of a run."""

    steps: List[StepOutcome] = field(
        default_factory=lambda: [StepOutcome(definition) for definition in STEP_DEFINITIONS]
    )
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    def step(self, number: int) -> StepOutcome:
        for outcome in self.steps:
            if outcome.number == number:
                return outcome
        raise KeyError(f"Unknown step number: {number}")

    @property
    def passed(self) -> bool:
        return all(outcome.status is StepStatus.PASSED for outcome in self.steps)

    @property
    def failed_step(self) -> Optional[StepOutcome]:
        return next(
            (outcome for outcome in self.steps if outcome.status is StepStatus.FAILED),
            None,
        )

    @property
    def passed_count(self) -> int:
        return sum(1 for outcome in self.steps if outcome.status is StepStatus.PASSED)
