from __future__ import annotations

"""
Score normalisation: raw model outputs ("logits") -> probability vector.

Public helpers:

* as_score_vector(scores) -> np.ndarray
    Validate and coerce a score sequence into a 1-D float64 array.

* softmax(scores, temperature=1.0) -> np.ndarray
    Numerically stable softmax.  NaN / infinite inputs are rejected with
    NumericError rather than propagated, so a result never mixes valid and
    invalid probabilities.
"""

import math
from typing import Sequence, Union

import numpy as np

from .config import SOFTMAX_TEMPERATURE
from .errors import InvalidInput, NumericError

ScoreLike = Union[Sequence[float], np.ndarray]


def as_score_vector(scores: ScoreLike) -> np.ndarray:
    """Return ``scores`` as a finite, non-empty 1-D float64 array (always a copy)."""
    try:
        arr = np.array(scores, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Score vector must be numeric: {e}") from e

    # accept a (1, N) batch of one, as returned by most model heads
    if arr.ndim == 2 and arr.shape[0] == 1:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise InvalidInput(f"Score vector must be 1-D. Got shape {arr.shape}.")
    if arr.size == 0:
        raise InvalidInput("Score vector is empty")

    bad = ~np.isfinite(arr)
    if bad.any():
        first = int(np.flatnonzero(bad)[0])
        raise NumericError(
            f"Score vector has {int(bad.sum())} non-finite value(s); first at index {first} ({arr[first]})"
        )
    return arr


def softmax(scores: ScoreLike, temperature: float = SOFTMAX_TEMPERATURE) -> np.ndarray:
    """
    exp(s_i - max(s)) / sum_j exp(s_j - max(s)), after dividing by ``temperature``.

    The max shift keeps large logits from overflowing; the result is the
    same distribution.  The input is never modified.
    """
    if isinstance(temperature, bool) or not isinstance(temperature, (int, float)):
        raise InvalidInput(f"temperature must be a number, got {type(temperature).__name__}")
    if not math.isfinite(temperature) or temperature <= 0:
        raise InvalidInput(f"temperature must be finite and > 0, got {temperature}")

    logits = as_score_vector(scores)
    # shift before scaling: the max entry stays 0, the rest can only go to -inf
    shifted = logits - logits.max()
    if temperature != 1.0:
        shifted = shifted / float(temperature)

    exps = np.exp(shifted)
    return exps / exps.sum()
