from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import List, Sequence, Union

import numpy as np

from .config import TOPK_METHOD, TOPK_METHODS
from .errors import InvalidInput, NumericError


@dataclass(frozen=True)
class RankedEntry:
    """One selected class: original position in the vector and its value."""

    index: int
    value: float


def _check_k(k: int, n: int) -> None:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidInput(f"k must be an integer, got {type(k).__name__}")
    if k < 0:
        raise InvalidInput(f"k must be >= 0, got {k}")
    if k > n:
        raise InvalidInput(f"k={k} exceeds vector length {n}")


def _sort_select(values: np.ndarray, k: int) -> List[int]:
    # stable sort on the negated values: descending, lower index first on ties
    order = np.argsort(-values, kind="stable")
    return [int(i) for i in order[:k]]


def _heap_select(values: np.ndarray, k: int) -> List[int]:
    pairs = heapq.nsmallest(k, enumerate(values.tolist()), key=lambda p: (-p[1], p[0]))
    return [i for i, _ in pairs]


def top_k(
    values: Union[Sequence[float], np.ndarray],
    k: int,
    method: str = TOPK_METHOD,
) -> List[RankedEntry]:
    """
    Return the ``k`` largest entries of ``values`` with their indices.

    Parameters
    ----------
    values :
        1-D numeric vector (typically a probability vector).
    k :
        Number of entries to return, ``0 <= k <= len(values)``.
    method :
        ``"sort"`` sorts every entry and truncates.  ``"heap"`` keeps a
        bounded heap, which is cheaper when ``k`` is much smaller than the
        vector.  Both return exactly the same entries in the same order.

    Returns
    -------
    List[RankedEntry]
        Sorted by value descending; equal values keep their input order.
    """
    if method not in TOPK_METHODS:
        raise InvalidInput(f"Unknown top-k method {method!r}; expected one of {TOPK_METHODS}")

    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"Values must be numeric: {e}") from e
    if arr.ndim != 1:
        raise InvalidInput(f"Values must be 1-D. Got shape {arr.shape}.")

    n = int(arr.shape[0])
    _check_k(k, n)
    if np.isnan(arr).any():
        raise NumericError("Cannot rank a vector containing NaN")

    k = int(k)
    if k == 0:
        return []

    picked = _heap_select(arr, k) if method == "heap" else _sort_select(arr, k)
    return [RankedEntry(index=i, value=float(arr[i])) for i in picked]
