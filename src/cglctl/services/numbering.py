"""NumberingService: the numbering engine exposed as service operations.

These operations touch no storage; they let the CLI (or any other
adapter) format, parse, advance, and compare visible numbers with the
same rules the creation pipeline uses.
"""

from __future__ import annotations

from decimal import Decimal

from cglctl.domain.errors import NumberOverflowError
from cglctl.domain.numbering import (
    DEFAULT_STEPS,
    EntityKind,
    compare_visible,
    format_visible,
    next_visible,
    parse_visible,
)
from cglctl.services.result import ServiceResult


class NumberingService:
    """Stateless wrappers over :mod:`cglctl.domain.numbering`."""

    def __init__(self, *, strict: bool = False) -> None:
        self._strict = strict

    def format(self, major: int, minor: int = 0) -> ServiceResult:
        op = "format_number"
        try:
            text = format_visible(major, minor)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_NUMBER", str(exc))
        return ServiceResult(ok=True, op=op, data={"visible": text})

    def parse(self, text: str) -> ServiceResult:
        op = "parse_number"
        parts = parse_visible(text, strict=self._strict)
        if parts is None:
            return ServiceResult.failure(
                op, "INVALID_NUMBER", f"{text!r} is not a visible number", input=text
            )
        major, minor = parts
        warnings: list[str] = []
        if parse_visible(text, strict=True) is None:
            warnings.append(f"{text!r} is not in MMM.mm form; fraction dropped")
        return ServiceResult(
            ok=True,
            op=op,
            data={"input": text, "major": major, "minor": minor},
            warnings=warnings,
        )

    def next(
        self,
        last: str | None,
        *,
        step: str | Decimal | None = None,
        kind: EntityKind = EntityKind.RECORD,
    ) -> ServiceResult:
        """Compute the number after *last*; *step* defaults to *kind*'s step."""
        op = "next_number"
        effective = step if step is not None else DEFAULT_STEPS[kind]
        try:
            text = next_visible(last, effective, strict=self._strict)
        except NumberOverflowError as exc:
            return ServiceResult.failure(op, "NUMBER_OVERFLOW", str(exc), last=exc.last)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_NUMBER", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"last": last, "step": str(effective), "visible": text},
        )

    def compare(self, a: str, b: str) -> ServiceResult:
        op = "compare_numbers"
        try:
            ordering = compare_visible(a, b, strict=self._strict)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_NUMBER", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={"a": a, "b": b, "result": ordering.name.lower(), "sign": int(ordering)},
        )
