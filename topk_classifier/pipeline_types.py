"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RankedClass:
    """A resolved top-K entry: class index, its label and probability."""

    index: int
    label: str
    probability: float
