from pathlib import Path

import pytest

from quiz_e2e.config import Settings, get_settings


def test_defaults_reproduce_the_canonical_run():
    settings = get_settings()

    assert settings.answer_key == (0, 2, 1, 1, 2, 0, 1, 2, 1, 2)
    assert settings.quiz_category == "programming"
    assert settings.quiz_difficulty == "easy"
    assert settings.quiz_username == "Selenium Test User"
    assert settings.wait_timeout_seconds == 20.0
    assert settings.wait_timeout_ms == 20_000
    assert settings.result_preview_limit == 3


def test_default_quiz_url_points_at_local_webapp(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    url = get_settings().resolved_quiz_url

    assert url.startswith("file://")
    assert url.endswith("/webapp/index.html")
    assert Path(tmp_path.name).name in url


def test_explicit_quiz_url_wins(monkeypatch):
    monkeypatch.setenv("QUIZ_URL", "http://localhost:8000/index.html")
    get_settings.cache_clear()

    assert get_settings().resolved_quiz_url == "http://localhost:8000/index.html"


def test_answer_key_is_parsed_from_environment(monkeypatch):
    monkeypatch.setenv("ANSWER_KEY", " 3, 1 ,0 ")
    get_settings.cache_clear()

    assert get_settings().answer_key == (3, 1, 0)


@pytest.mark.parametrize("raw", ["", "1,-2,0", "a,b"])
def test_invalid_answer_key_is_rejected(raw):
    with pytest.raises(ValueError):
        Settings(ANSWER_KEY=raw)


def test_non_positive_timeout_surfaces_readable_error(monkeypatch):
    monkeypatch.setenv("WAIT_TIMEOUT_SECONDS", "0")
    get_settings.cache_clear()

    with pytest.raises(RuntimeError, match="wait_timeout_seconds|WAIT_TIMEOUT_SECONDS"):
        get_settings()
