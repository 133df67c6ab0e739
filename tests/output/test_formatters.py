"""Tests for the format_result dispatcher and OutputSettings."""

import json

import pytest

from cglctl.output.formatters import OutputSettings, format_result
from cglctl.services.result import ServiceError, ServiceResult


def _ok(op: str = "test", **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str = "test", msg: str = "fail") -> ServiceResult:
    return ServiceResult(ok=False, op=op, error=ServiceError(code="ERR", message=msg))


class TestOutputSettings:
    def test_defaults(self) -> None:
        s = OutputSettings()
        assert s.json_output is False
        assert s.quiet is False
        assert s.verbose is False

    def test_frozen(self) -> None:
        s = OutputSettings(json_output=True)
        with pytest.raises(AttributeError):
            s.quiet = True  # type: ignore[misc]


class TestFormatResult:
    def test_json_mode(self) -> None:
        output = format_result(
            _ok("create_book", visible="000.00"), settings=OutputSettings(json_output=True)
        )
        data = json.loads(output)
        assert data["ok"] is True
        assert data["data"]["visible"] == "000.00"

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(_err(), settings=settings))["ok"] is False

    def test_quiet_mode(self) -> None:
        output = format_result(_ok("create_book", id="bk_a"), settings=OutputSettings(quiet=True))
        assert output == "bk_a"

    def test_default_is_rich(self) -> None:
        output = format_result(_ok("create_book", id="bk_a"))
        assert output.startswith("OK")
        assert "create_book" in output
