"""Domain exceptions for visible numbering."""

from __future__ import annotations


class NumberingError(ValueError):
    """Base class for visible-number domain errors."""


class NumberRangeError(NumberingError):
    """A major/minor pair falls outside ``000.00``..``999.99``."""


class NumberOverflowError(NumberingError):
    """Advancing a visible number would exceed ``999.99``.

    Attributes:
        last: The number that was being advanced.
        step: The step that was applied.
    """

    def __init__(self, last: str, step: object) -> None:
        self.last = last
        self.step = step
        super().__init__(f"Advancing {last} by {step} exceeds the 999.99 ceiling")
