from __future__ import annotations


class QuizRunError(RuntimeError):
    """Base class for failures that abort a quiz run."""


class BrowserLaunchError(QuizRunError):
    """Raised when the browser session cannot be started."""


class StepFailure(QuizRunError):
    """Raised when one of the five scripted steps cannot complete."""

    def __init__(self, step: int, message: str) -> None:
        super().__init__(message)
        self.step = step
        self.message = message

    def __str__(self) -> str:
        return f"Step {self.step}: {self.message}"


class ElementNotFound(QuizRunError):
    """Raised when a required element ID is absent from the page."""

    def __init__(self, element_id: str, description: str) -> None:
        super().__init__(f"{description} verification failed (#{element_id} not found)")
        self.element_id = element_id
        self.description = description
