"""Tests for engine logging."""

import logging
import time

import pytest

from match_engine.observability import get_logger


def test_get_logger_writes_utc_timestamps_to_stderr(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fixed = time.struct_time((2026, 3, 4, 12, 30, 15, 2, 63, 0))

    def fake_gmtime(_: float | None = None) -> time.struct_time:
        return fixed

    monkeypatch.setattr(time, "gmtime", fake_gmtime)

    logger = get_logger("match_engine.test.logging")
    logger.info("Scored %s targets", 12)

    captured = capsys.readouterr()
    assert "2026-03-04T12:30:15+0000 INFO match_engine.test.logging: Scored 12 targets" in (
        captured.err
    )
    assert captured.out == ""


def test_get_logger_configures_each_name_once() -> None:
    name = "match_engine.test.logging.once"
    logger = get_logger(name)
    logger_again = get_logger(name, level=logging.DEBUG)

    assert logger is logger_again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


def test_get_logger_applies_level_on_first_use() -> None:
    logger = get_logger("match_engine.test.logging.quiet", level=logging.WARNING)

    assert logger.level == logging.WARNING
    assert not logger.isEnabledFor(logging.INFO)
