import logging
from datetime import datetime

from quiz_e2e.run_log import RunLog, split_entry


def _fixed_clock() -> datetime:
    return datetime(2024, 5, 17, 9, 4, 7)


def test_entries_are_timestamped_and_ordered():
    run_log = RunLog(clock=_fixed_clock)

    run_log.info("first")
    run_log.warning("second")

    assert run_log.entries == ["[09:04:07] first", "[09:04:07] second"]
    assert len(run_log) == 2


def test_entries_are_mirrored_to_logging(caplog):
    run_log = RunLog(clock=_fixed_clock)

    with caplog.at_level(logging.INFO, logger="quiz_e2e.run_log"):
        run_log.error("Driver exploded", step="step2")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "Driver exploded"
    assert record.step == "step2"


def test_split_entry_separates_timestamp():
    assert split_entry("[09:04:07] hello world") == ("[09:04:07]", "hello world")
    assert split_entry("no stamp") == ("", "no stamp")
