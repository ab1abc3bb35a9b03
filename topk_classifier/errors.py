"""Failure surface for the classification post-processing core."""

from __future__ import annotations


class ClassificationError(Exception):
    """Base class for every error raised by this package."""


class InvalidInput(ClassificationError, ValueError):
    """Malformed call parameters: empty vector, bad shape, K out of range."""


class NumericError(ClassificationError, ArithmeticError):
    """NaN or infinite values in a score vector."""


class LabelLookupError(ClassificationError, LookupError):
    """A selected index plus offset is not a key of the label table."""

    def __init__(self, index: int, offset: int) -> None:
        self.index = index
        self.offset = offset
        self.key = index + offset
        super().__init__(
            f"No label for class index {index} with offset {offset} (key {self.key})"
        )
