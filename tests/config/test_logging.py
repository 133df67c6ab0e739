"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from cglctl.config.logging import bind_library, configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    cgl = logging.getLogger("cglctl")
    cgl_level = cgl.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    cgl.setLevel(cgl_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("cglctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("cglctl").level == logging.WARNING

    def test_sqlalchemy_quieted(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("cglctl.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "cglctl.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_rendered_as_json(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("cglctl.infrastructure").debug("Reserved %s", "005.00")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Reserved 005.00"
        assert parsed["level"] == "debug"

    def test_quiet_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        structlog.get_logger("cglctl.test").info("hidden")
        assert capfd.readouterr().err == ""

    def test_pool_logger_quieted(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("sqlalchemy.pool").level == logging.WARNING

    def test_exception_rendered_as_dict(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        log = structlog.get_logger("cglctl.test")
        try:
            raise ValueError("bad number")
        except ValueError:
            log.exception("failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["exception"][0]["exc_type"] == "ValueError"
        assert parsed["exception"][0]["exc_value"] == "bad number"


class TestBindLibrary:
    def test_library_in_json_events(
        self, tmp_path: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(log_json=True)
        bind_library(tmp_path)
        structlog.get_logger("cglctl.test").warning("reserved")
        logging.getLogger("cglctl.infrastructure").warning("stdlib")
        lines = capfd.readouterr().err.strip().splitlines()
        assert [json.loads(line)["library"] for line in lines] == [str(tmp_path)] * 2

    def test_unbound_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("cglctl.test").warning("plain")
        assert "library" not in json.loads(capfd.readouterr().err.strip())
