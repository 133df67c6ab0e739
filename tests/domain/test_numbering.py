"""Tests for visible-number formatting, parsing, advancement, and ordering."""

from decimal import Decimal
from functools import cmp_to_key

import pytest

from cglctl.domain.errors import NumberingError, NumberOverflowError, NumberRangeError
from cglctl.domain.numbering import (
    DEFAULT_STEPS,
    MAX_VISIBLE,
    MIN_VISIBLE,
    EntityKind,
    Ordering,
    RangeBounds,
    VisibleNumber,
    compare_visible,
    format_visible,
    in_range,
    next_visible,
    numeric_parts,
    parse_visible,
    resolve_range,
    sort_key,
    step_hundredths,
)


class TestFormatVisible:
    @pytest.mark.parametrize(
        ("major", "minor", "expected"),
        [
            (0, 0, "000.00"),
            (12, 5, "012.05"),
            (999, 99, "999.99"),
            (7, 50, "007.50"),
        ],
    )
    def test_canonical_form(self, major: int, minor: int, expected: str) -> None:
        assert format_visible(major, minor) == expected

    def test_minor_defaults_to_zero(self) -> None:
        assert format_visible(5) == "005.00"

    def test_major_may_exceed_three_digits(self) -> None:
        assert format_visible(1000, 0) == "1000.00"

    def test_minor_carries_into_major(self) -> None:
        assert format_visible(1, 150) == "002.50"

    def test_negative_parts_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            format_visible(-1, 0)
        with pytest.raises(ValueError):
            format_visible(0, -1)


class TestParseVisible:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("000.00", (0, 0)),
            ("012.05", (12, 5)),
            ("999.99", (999, 99)),
            ("7", (7, 0)),
            ("12.5", (12, 5)),
            ("  005.00 ", (5, 0)),
        ],
    )
    def test_pattern_matches(self, text: str, expected: tuple[int, int]) -> None:
        assert parse_visible(text) == expected

    @pytest.mark.parametrize("text", ["000.00", "012.05", "999.99", "100.10", "042.00"])
    def test_canonical_strings_round_trip(self, text: str) -> None:
        parts = parse_visible(text)
        assert parts is not None
        assert format_visible(*parts) == text

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1000", (1000, 0)),
            ("12.345", (12, 0)),
            ("1234.5", (1234, 0)),
            ("5.", (5, 0)),
        ],
    )
    def test_numeric_fallback_drops_fraction(self, text: str, expected: tuple[int, int]) -> None:
        assert parse_visible(text) == expected

    @pytest.mark.parametrize("text", ["1000", "12.345", "5."])
    def test_strict_disables_fallback(self, text: str) -> None:
        assert parse_visible(text, strict=True) is None

    @pytest.mark.parametrize("text", ["", "abc", "12a", "1.2.3", "one"])
    def test_non_numeric_is_none(self, text: str) -> None:
        assert parse_visible(text) is None

    def test_none_is_none(self) -> None:
        assert parse_visible(None) is None

    def test_huge_exponent_is_rejected(self) -> None:
        assert parse_visible("1e100000000") is None
        assert parse_visible("-1e100000000") is None


class TestNumericParts:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("012.5", (12, 50)),
            ("12.5", (12, 50)),
            ("012.05", (12, 5)),
            ("7", (7, 0)),
            ("12.345", (12, 0)),
        ],
    )
    def test_fraction_is_decimal(self, text: str, expected: tuple[int, int]) -> None:
        assert numeric_parts(text) == expected

    def test_strict(self) -> None:
        assert numeric_parts("12.345", strict=True) is None
        assert numeric_parts("2.5", strict=True) == (2, 50)

    def test_huge_exponent_is_rejected(self) -> None:
        assert numeric_parts("1e100000000") is None


class TestStepHundredths:
    @pytest.mark.parametrize(
        ("step", "expected"),
        [(5, 500), (10, 1000), ("0.25", 25), (Decimal("1.5"), 150), (0.01, 1)],
    )
    def test_valid(self, step: object, expected: int) -> None:
        assert step_hundredths(step) == expected

    @pytest.mark.parametrize("step", [0, -5, "0.001", "abc"])
    def test_invalid(self, step: object) -> None:
        with pytest.raises(ValueError):
            step_hundredths(step)


class TestNextVisible:
    def test_empty_scope_starts_at_zero(self) -> None:
        assert next_visible(None, 5) == "000.00"

    def test_unparsable_last_starts_at_zero(self) -> None:
        assert next_visible("garbage", 10) == "000.00"

    def test_book_step(self) -> None:
        assert next_visible("000.00", 5) == "005.00"

    def test_record_step(self) -> None:
        assert next_visible("000.00", 10) == "010.00"

    def test_step_keeps_minor(self) -> None:
        assert next_visible("002.50", 10) == "012.50"

    def test_fractional_step_crosses_major(self) -> None:
        assert next_visible("001.90", "0.25") == "002.15"

    def test_lenient_last_is_floored(self) -> None:
        assert next_visible("12.345", 10) == "022.00"

    def test_one_digit_fraction_is_tenths(self) -> None:
        assert next_visible("012.5", 5) == "017.50"

    def test_huge_last_restarts(self) -> None:
        assert next_visible("1e100000000", 10) == "000.00"

    def test_strict_last_restarts(self) -> None:
        assert next_visible("12.345", 10, strict=True) == "000.00"

    def test_reaches_ceiling(self) -> None:
        assert next_visible("994.99", 5) == "999.99"

    def test_overflow_raises(self) -> None:
        with pytest.raises(NumberOverflowError) as excinfo:
            next_visible("995.00", 5)
        assert excinfo.value.last == "995.00"
        assert excinfo.value.step == 5
        assert "999.99" in str(excinfo.value)

    def test_overflow_is_numbering_error(self) -> None:
        with pytest.raises(NumberingError):
            next_visible("999.99", "0.01")

    def test_invalid_step(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            next_visible("000.00", 0)

    def test_default_steps(self) -> None:
        assert DEFAULT_STEPS == {
            EntityKind.BOOK: 5,
            EntityKind.CHAPTER: 5,
            EntityKind.RECORD: 10,
        }


class TestCompareVisible:
    def test_greater(self) -> None:
        assert compare_visible("012.50", "012.49") is Ordering.GREATER

    def test_equal(self) -> None:
        assert compare_visible("005.00", "005.00") is Ordering.EQUAL

    def test_less(self) -> None:
        assert compare_visible("002.50", "010.00") is Ordering.LESS

    def test_equal_across_spellings(self) -> None:
        assert compare_visible("5", "005.00") is Ordering.EQUAL

    def test_one_digit_fraction_is_tenths(self) -> None:
        assert compare_visible("012.5", "012.05") is Ordering.GREATER
        assert compare_visible("012.5", "012.50") is Ordering.EQUAL

    def test_major_dominates_minor(self) -> None:
        assert compare_visible("010.00", "009.99") is Ordering.GREATER

    def test_unparsable_raises(self) -> None:
        with pytest.raises(ValueError, match="Not a visible number"):
            compare_visible("abc", "001.00")

    def test_usable_with_cmp_to_key(self) -> None:
        numbers = ["010.00", "002.50", "000.00", "009.99"]
        ordered = sorted(numbers, key=cmp_to_key(compare_visible))
        assert ordered == ["000.00", "002.50", "009.99", "010.00"]

    def test_sort_key(self) -> None:
        assert sorted(["020.00", "1000", "002.50"], key=sort_key) == ["002.50", "020.00", "1000"]


class TestVisibleNumber:
    def test_str_is_canonical(self) -> None:
        assert str(VisibleNumber(12, 5)) == "012.05"

    def test_key_and_value(self) -> None:
        number = VisibleNumber(12, 50)
        assert number.key == 1250
        assert number.value == Decimal("12.50")

    def test_from_key(self) -> None:
        assert VisibleNumber.from_key(250) == VisibleNumber(2, 50)

    def test_from_negative_key(self) -> None:
        with pytest.raises(NumberRangeError):
            VisibleNumber.from_key(-1)

    def test_ordering(self) -> None:
        assert VisibleNumber(2, 50) < VisibleNumber(10, 0) < VisibleNumber(10, 1)

    @pytest.mark.parametrize(("major", "minor"), [(1000, 0), (0, 100), (-1, 0)])
    def test_out_of_range(self, major: int, minor: int) -> None:
        with pytest.raises(NumberRangeError):
            VisibleNumber(major, minor)

    def test_parse(self) -> None:
        assert VisibleNumber.parse("002.50") == VisibleNumber(2, 50)
        assert VisibleNumber.parse("nope") is None

    def test_parse_reads_tenths(self) -> None:
        assert VisibleNumber.parse("2.5", strict=True) == VisibleNumber(2, 50)

    def test_parse_fallback_out_of_range(self) -> None:
        with pytest.raises(NumberRangeError):
            VisibleNumber.parse("1000")


class TestRanges:
    def test_defaults_cover_everything(self) -> None:
        bounds = resolve_range()
        assert str(bounds) == f"{MIN_VISIBLE}..{MAX_VISIBLE}"
        assert not bounds.is_empty

    def test_malformed_bounds_use_defaults(self) -> None:
        assert resolve_range("abc", "12.345") == RangeBounds(lower=(0, 0), upper=(999, 99))

    def test_inverted_is_empty(self) -> None:
        bounds = resolve_range("020.00", "010.00")
        assert bounds.is_empty
        assert not in_range("015.00", bounds)

    def test_in_range_inclusive(self) -> None:
        bounds = resolve_range("010.00", "020.50")
        assert in_range("010.00", bounds)
        assert in_range("020.50", bounds)
        assert in_range("015.99", bounds)
        assert not in_range("020.51", bounds)
        assert not in_range("009.99", bounds)

    def test_in_range_rejects_garbage(self) -> None:
        assert not in_range("abc", resolve_range())
