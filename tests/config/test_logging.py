"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
import re

import pytest
import structlog

from kbase.config.logging import HANDLER_NAME, configure_logging, log_level


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("kbase").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False)
        assert logging.getLogger("kbase").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("kbase.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "kbase.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("kbase.infrastructure.vault").debug("Could not scan title")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Could not scan title"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "kbase.infrastructure.vault"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        structlog.get_logger("kbase.test").debug("quiet")
        assert capfd.readouterr().err == ""

    def test_parser_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("markdown_it").debug("rule noise")
        assert capfd.readouterr().err == ""

    def test_quiet_shows_errors_only(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(quiet=True, log_json=True)
        log = structlog.get_logger("kbase.test")
        log.warning("hidden")
        log.error("shown")
        lines = capfd.readouterr().err.strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["shown"]

    def test_console_timestamp_is_time_of_day(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        structlog.get_logger("kbase.test").warning("plain")
        err = capfd.readouterr().err
        assert "plain" in err
        assert re.match(r"\d\d:\d\d:\d\d ", err)

    def test_reconfiguring_keeps_one_kbase_handler(self) -> None:
        configure_logging(verbose=True)
        configure_logging(log_json=True)
        names = [h.get_name() for h in logging.getLogger().handlers]
        assert names.count(HANDLER_NAME) == 1

    def test_foreign_handlers_survive(self) -> None:
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)
        configure_logging()
        assert foreign in logging.getLogger().handlers


@pytest.mark.parametrize(
    ("verbose", "quiet", "expected"),
    [
        (False, False, logging.WARNING),
        (True, False, logging.DEBUG),
        (False, True, logging.ERROR),
        (True, True, logging.DEBUG),
    ],
)
def test_log_level(verbose: bool, quiet: bool, expected: int) -> None:
    assert log_level(verbose=verbose, quiet=quiet) == expected
