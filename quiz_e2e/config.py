"""
Centralized runner configuration powered by Pydantic settings.

Every knob has a default that reproduces the canonical quiz run (Programming /
Easy, the ten-entry answer key, 20 second bounded waits), so the runner works
without any environment at all. Values can be overridden through the shell or
a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ANSWER_KEY = "0,2,1,1,2,0,1,2,1,2"


class Settings(BaseSettings):
    """Runtime configuration for the scripted quiz UI test."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(
        default="Quiz Automation Test Suite",
        validation_alias=AliasChoices("APP_NAME"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )

    quiz_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("QUIZ_URL"),
        description="Page under test; defaults to webapp/index.html below the working directory.",
    )
    quiz_username: str = Field(
        default="Selenium Test User",
        validation_alias=AliasChoices("QUIZ_USERNAME"),
    )
    quiz_category: str = Field(
        default="programming",
        validation_alias=AliasChoices("QUIZ_CATEGORY"),
    )
    quiz_difficulty: str = Field(
        default="easy",
        validation_alias=AliasChoices("QUIZ_DIFFICULTY"),
    )
    answer_key_raw: str = Field(
        default=DEFAULT_ANSWER_KEY,
        validation_alias=AliasChoices("ANSWER_KEY"),
        description="Comma-separated option index to pick for each question, in order.",
    )

    browser_headless: bool = Field(
        default=False,
        validation_alias=AliasChoices("BROWSER_HEADLESS"),
        description="Run Chromium without a visible window.",
    )
    browser_channel: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("BROWSER_CHANNEL"),
        description="Optional Playwright channel such as 'chrome' or 'msedge'.",
    )
    wait_timeout_seconds: float = Field(
        default=20.0,
        validation_alias=AliasChoices("WAIT_TIMEOUT_SECONDS"),
        description="Upper bound for marker-element and page-transition waits.",
    )
    settle_timeout_seconds: float = Field(
        default=5.0,
        validation_alias=AliasChoices("SETTLE_TIMEOUT_SECONDS"),
        description="Upper bound for client-side state to settle after selecting an option.",
    )

    screenshot_dir: Path = Field(
        default=Path("test-screenshots"),
        validation_alias=AliasChoices("SCREENSHOT_DIR"),
    )
    report_dir: Path = Field(
        default=Path("."),
        validation_alias=AliasChoices("REPORT_DIR"),
    )
    result_preview_limit: int = Field(
        default=3,
        validation_alias=AliasChoices("RESULT_PREVIEW_LIMIT"),
        description="Number of per-question result rows inspected on the results page.",
    )

    @field_validator("wait_timeout_seconds", "settle_timeout_seconds")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Timeout values must be positive.")
        return value

    @field_validator("result_preview_limit")
    @classmethod
    def _validate_preview_limit(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Result preview limit cannot be negative.")
        return value

    @field_validator("answer_key_raw")
    @classmethod
    def _validate_answer_key(cls, value: str) -> str:
        parsed = cls._parse_answer_key(value)
        if not parsed:
            raise ValueError("Answer key must contain at least one option index.")
        if any(index < 0 for index in parsed):
            raise ValueError("Answer key indices must be non-negative.")
        return value

    @staticmethod
    def _parse_answer_key(data: str) -> Tuple[int, ...]:
        try:
            return tuple(int(item.strip()) for item in data.split(",") if item.strip())
        except ValueError as exc:
            raise ValueError(f"Answer key must be comma-separated integers: {data!r}") from exc

    @property
    def answer_key(self) -> Tuple[int, ...]:
        """Return the parsed, immutable answer key."""
        return self._parse_answer_key(self.answer_key_raw)

    @property
    def resolved_quiz_url(self) -> str:
        """Return the configured URL or the local ``webapp/index.html`` file URL."""
        if self.quiz_url:
            return self.quiz_url
        return (Path.cwd() / "webapp" / "index.html").resolve().as_uri()

    @property
    def wait_timeout_ms(self) -> int:
        return int(self.wait_timeout_seconds * 1000)

    @property
    def settle_timeout_ms(self) -> int:
        return int(self.settle_timeout_seconds * 1000)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance to avoid re-reading the environment."""
    try:
        return Settings()
    except ValidationError as exc:
        invalid_fields = sorted(
            {
                ".".join(str(part) for part in error.get("loc", []))
                for error in exc.errors()
            }
        )
        hint = ", ".join(invalid_fields) if invalid_fields else "unknown fields"
        raise RuntimeError(
            "Invalid runner configuration. "
            f"Check the following keys in your .env or shell environment: {hint}"
        ) from exc
