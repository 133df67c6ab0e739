"""Visible numbering: the human-facing ``major.minor`` identifiers.

Books, chapters, and records each carry a decimal identifier such as
``012.50`` that users see and sort by.  It is independent of the row ID.
Numbers are assigned with a fixed step per entity kind (books 5,
chapters 5, records 10) so that gaps remain for manual insertions.

Canonical form is ``MMM.mm``: major zero-padded to at least three digits,
minor to exactly two.  Arithmetic and comparison happen on the combined
decimal value ``major + minor/100``, held internally as integer
hundredths to avoid floating-point drift.

INVARIANT: The engine is stateless.  The last number assigned in a scope
is always passed in by the caller; nothing here remembers it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import IntEnum, StrEnum

from cglctl.domain.errors import NumberOverflowError, NumberRangeError

MAJOR_MAX = 999
MINOR_MAX = 99
MAX_KEY = MAJOR_MAX * 100 + MINOR_MAX

MIN_VISIBLE = "000.00"
MAX_VISIBLE = "999.99"

VISIBLE_PATTERN = re.compile(r"(\d{1,3})(?:\.(\d{1,2}))?", re.ASCII)
_NUMERIC_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Lenient parsing gives up at 10**FALLBACK_MAX_DIGITS and above.
FALLBACK_MAX_DIGITS = 18


class EntityKind(StrEnum):
    """Entity kinds that carry a visible number."""

    BOOK = "book"
    CHAPTER = "chapter"
    RECORD = "record"


DEFAULT_STEPS: dict[EntityKind, int] = {
    EntityKind.BOOK: 5,
    EntityKind.CHAPTER: 5,
    EntityKind.RECORD: 10,
}


class Ordering(IntEnum):
    """Three-way comparison outcome (usable with ``functools.cmp_to_key``)."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True, order=True)
class VisibleNumber:
    """A validated ``(major, minor)`` pair, ordered by major then minor."""

    major: int
    minor: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.major <= MAJOR_MAX:
            msg = f"major must be within 0..{MAJOR_MAX}, got {self.major}"
            raise NumberRangeError(msg)
        if not 0 <= self.minor <= MINOR_MAX:
            msg = f"minor must be within 0..{MINOR_MAX}, got {self.minor}"
            raise NumberRangeError(msg)

    @property
    def key(self) -> int:
        """Combined value in integer hundredths (``012.50`` -> ``1250``)."""
        return self.major * 100 + self.minor

    @property
    def value(self) -> Decimal:
        """Combined decimal value ``major + minor/100``."""
        return Decimal(self.key).scaleb(-2)

    @classmethod
    def from_key(cls, key: int) -> VisibleNumber:
        """Build from integer hundredths."""
        if key < 0:
            msg = f"visible number key must be non-negative, got {key}"
            raise NumberRangeError(msg)
        major, minor = divmod(key, 100)
        return cls(major, minor)

    @classmethod
    def parse(cls, text: str | None, *, strict: bool = False) -> VisibleNumber | None:
        """Parse *text* by value (``"2.5"`` is ``002.50``), or None if not a number.

        Raises:
            NumberRangeError: If the lenient fallback yields a value outside
                the valid range (e.g. ``"1000"``).
        """
        parts = numeric_parts(text, strict=strict)
        if parts is None:
            return None
        return cls(*parts)

    def __str__(self) -> str:
        return format_visible(self.major, self.minor)


def format_visible(major: int, minor: int = 0) -> str:
    """Render *major* and *minor* as ``MMM.mm``.

    Major is padded to a minimum of three digits and may grow wider.
    A minor of 100 or more carries into major.

    Examples:
        >>> format_visible(12, 5)
        '012.05'
        >>> format_visible(1000, 0)
        '1000.00'
    """
    if major < 0 or minor < 0:
        msg = f"Visible number parts must be non-negative, got ({major}, {minor})"
        raise ValueError(msg)
    carry, minor = divmod(minor, 100)
    return f"{major + carry:03d}.{minor:02d}"


def parse_visible(text: str | None, *, strict: bool = False) -> tuple[int, int] | None:
    """Split a visible-number string into ``(major, minor)``.

    ``"12.5"`` parses as ``(12, 5)``: the decimal digits are read as an
    integer, not as a fraction.  Strings that do not match ``MMM.mm`` but
    are still numeric fall back to ``(floor(value), 0)``, dropping any
    fraction.  With *strict* the fallback is disabled and such strings
    return None.  Non-numeric input always returns None, as does a
    numeric string whose magnitude reaches ``10**FALLBACK_MAX_DIGITS``.

    Use :func:`numeric_parts` where the number takes part in arithmetic
    or ordering.
    """
    if text is None:
        return None
    raw = str(text).strip()
    match = VISIBLE_PATTERN.fullmatch(raw)
    if match is not None:
        return int(match.group(1)), int(match.group(2) or "0")
    if strict:
        return None
    return _numeric_fallback(raw)


def numeric_parts(text: str | None, *, strict: bool = False) -> tuple[int, int] | None:
    """Split *text* by its combined decimal value.

    Unlike :func:`parse_visible`, a one-digit fraction means tenths:
    ``"012.5"`` is ``(12, 50)``, the same number as ``"012.50"``.  The
    fallback and *strict* behave as in :func:`parse_visible`.
    """
    if text is None:
        return None
    raw = str(text).strip()
    match = VISIBLE_PATTERN.fullmatch(raw)
    if match is not None:
        return int(match.group(1)), int((match.group(2) or "0").ljust(2, "0"))
    if strict:
        return None
    return _numeric_fallback(raw)


def _numeric_fallback(raw: str) -> tuple[int, int] | None:
    if _NUMERIC_PATTERN.fullmatch(raw) is None:
        return None
    value = Decimal(raw)
    if value.adjusted() >= FALLBACK_MAX_DIGITS:
        return None
    return math.floor(value), 0


def step_hundredths(step: int | float | str | Decimal) -> int:
    """Convert a step size into integer hundredths.

    Raises:
        ValueError: If *step* is not positive or has more than two decimals.
    """
    try:
        amount = Decimal(str(step))
    except InvalidOperation as exc:
        msg = f"Step must be numeric, got {step!r}"
        raise ValueError(msg) from exc
    if not amount.is_finite() or amount <= 0:
        msg = f"Step must be a positive number, got {step!r}"
        raise ValueError(msg)
    scaled = amount.scaleb(2)
    if scaled != scaled.to_integral_value():
        msg = f"Step may have at most two decimal places, got {step!r}"
        raise ValueError(msg)
    return int(scaled)


def next_visible(
    last: str | None,
    step: int | float | str | Decimal,
    *,
    strict: bool = False,
) -> str:
    """Return the number that follows *last* by *step*.

    No prior number (None, empty, or unparsable) starts the scope at
    ``000.00``.  The step is added to the combined decimal value, so a
    step of 5 advances major by five and leaves minor untouched.

    Raises:
        ValueError: If *step* is invalid.
        NumberOverflowError: If the result would exceed ``999.99``.
    """
    increment = step_hundredths(step)
    parts = numeric_parts(last, strict=strict)
    if parts is None:
        return MIN_VISIBLE

    major, minor = parts
    key = major * 100 + minor + increment
    if key > MAX_KEY:
        raise NumberOverflowError(str(last).strip(), step)
    if key < 0:
        msg = f"Cannot advance negative visible number {last!r}"
        raise NumberRangeError(msg)
    return format_visible(*divmod(key, 100))


def _key_of(text: str, *, strict: bool = False) -> int:
    parts = numeric_parts(text, strict=strict)
    if parts is None:
        msg = f"Not a visible number: {text!r}"
        raise ValueError(msg)
    return parts[0] * 100 + parts[1]


def compare_visible(a: str, b: str, *, strict: bool = False) -> Ordering:
    """Compare two visible numbers by their combined decimal value.

    Raises:
        ValueError: If either side is not a visible number.
    """
    ka = _key_of(a, strict=strict)
    kb = _key_of(b, strict=strict)
    return Ordering((ka > kb) - (ka < kb))


def sort_key(text: str) -> int:
    """Key function for sorting visible-number strings ascending."""
    return _key_of(text)


# ---------------------------------------------------------------------------
# Inclusive ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RangeBounds:
    """Inclusive ``(major, minor)`` bounds for a range query."""

    lower: tuple[int, int]
    upper: tuple[int, int]

    @property
    def is_empty(self) -> bool:
        """Inverted bounds select nothing."""
        return self.lower > self.upper

    def __str__(self) -> str:
        return f"{format_visible(*self.lower)}..{format_visible(*self.upper)}"


def resolve_range(start: str | None = None, end: str | None = None) -> RangeBounds:
    """Resolve optional range endpoints, defaulting to the full scope.

    Endpoints are parsed strictly; a missing or malformed *start* becomes
    ``000.00`` and a missing or malformed *end* becomes ``999.99``.
    """
    lower = numeric_parts(start, strict=True) or (0, 0)
    upper = numeric_parts(end, strict=True) or (MAJOR_MAX, MINOR_MAX)
    return RangeBounds(lower=lower, upper=upper)


def in_range(number: str, bounds: RangeBounds) -> bool:
    """Whether *number* lies within *bounds* (inclusive)."""
    if bounds.is_empty:
        return False
    parts = numeric_parts(number)
    if parts is None:
        return False
    return bounds.lower <= parts <= bounds.upper
