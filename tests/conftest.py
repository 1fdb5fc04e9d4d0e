from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from quiz_e2e.config import get_settings


@pytest.fixture(autouse=True)
def configure_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """
    Point every artifact directory at a per-test temporary folder and refresh
    the cached settings, so no test writes screenshots or reports into the repo.
    """
    monkeypatch.setenv("SCREENSHOT_DIR", str(tmp_path / "screenshots"))
    monkeypatch.setenv("REPORT_DIR", str(tmp_path / "reports"))
    monkeypatch.setenv("BROWSER_HEADLESS", "true")
    monkeypatch.delenv("QUIZ_URL", raising=False)
    monkeypatch.delenv("ANSWER_KEY", raising=False)

    # Clear cached settings so changes take effect immediately.
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fixture_quiz_url() -> str:
    return (PROJECT_ROOT / "tests" / "fixtures" / "quiz_app.html").resolve().as_uri()
