from pathlib import Path

from quiz_e2e import main as cli
from quiz_e2e.config import get_settings
from quiz_e2e.outcomes import RunOutcome


def test_overrides_only_apply_explicit_flags(tmp_path):
    args = cli.build_parser().parse_args(
        ["--url", "http://localhost:9000/", "--report-dir", str(tmp_path)]
    )

    settings = cli.apply_overrides(get_settings(), args)

    assert settings.quiz_url == "http://localhost:9000/"
    assert settings.report_dir == Path(tmp_path)
    assert settings.browser_headless is True  # from the environment, untouched
    assert settings.answer_key == (0, 2, 1, 1, 2, 0, 1, 2, 1, 2)


def test_no_flags_keeps_settings_object():
    settings = get_settings()
    args = cli.build_parser().parse_args([])

    assert cli.apply_overrides(settings, args) is settings


def test_exit_code_reflects_outcome(monkeypatch):
    outcomes = {"passed": RunOutcome(), "failed": RunOutcome()}
    for step in outcomes["passed"].steps:
        step.mark_passed(None, 0.0)

    class StubRunner:
        result = outcomes["passed"]

        def __init__(self, *, settings):
            self.settings = settings

        def run(self) -> RunOutcome:
            return StubRunner.result

    monkeypatch.setattr(cli, "QuizTestRunner", StubRunner)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)

    assert cli.main([]) == 0
    StubRunner.result = outcomes["failed"]
    assert cli.main(["--headless"]) == 1


def test_invalid_configuration_exits_with_usage_code(monkeypatch, capsys):
    monkeypatch.setenv("SETTLE_TIMEOUT_SECONDS", "-1")
    get_settings.cache_clear()

    assert cli.main([]) == 2
    assert "Configuration error" in capsys.readouterr().err
