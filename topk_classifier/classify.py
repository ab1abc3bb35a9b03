from __future__ import annotations

"""
Inference-result post-processing.

Control flow for one call:

    logits -> softmax -> probability vector -> top_k -> (index, value)
           -> label lookup (index + offset) -> {label: probability}

Every step is a pure function of its inputs, so concurrent calls need no
coordination.  ``PredictionModel`` wraps an opaque model callable with a
replaceable label table.
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np
from loguru import logger

from .config import DEFAULT_LABEL_OFFSET, SOFTMAX_TEMPERATURE, TOPK_METHOD
from .labels import check_offset, lookup_label, resolve_labels
from .normalize import ScoreLike, as_score_vector, softmax
from .pipeline_types import RankedClass
from .topk import RankedEntry, top_k


def _select(logits: ScoreLike, k: int, method: str, temperature: float) -> List[RankedEntry]:
    probs = softmax(logits, temperature=temperature)
    entries = top_k(probs, k, method=method)
    logger.debug("Selected top-{} of {} classes", len(entries), probs.shape[0])
    return entries


def get_top_k_classes(
    logits: ScoreLike,
    top_k: int,
    label_table: Mapping[int, str],
    offset: int = DEFAULT_LABEL_OFFSET,
    method: str = TOPK_METHOD,
    temperature: float = SOFTMAX_TEMPERATURE,
) -> Dict[str, float]:
    """
    Top ``top_k`` classes for pre-softmax ``logits`` as ``{label: probability}``.

    Raises InvalidInput, NumericError or LabelLookupError; never returns a
    partial mapping.
    """
    entries = _select(logits, top_k, method, temperature)
    return resolve_labels(entries, label_table, offset=offset)


def rank_classes(
    logits: ScoreLike,
    top_k: int,
    label_table: Mapping[int, str],
    offset: int = DEFAULT_LABEL_OFFSET,
    method: str = TOPK_METHOD,
    temperature: float = SOFTMAX_TEMPERATURE,
) -> List[RankedClass]:
    """Same pipeline as get_top_k_classes, keeping rank order and class indices."""
    entries = _select(logits, top_k, method, temperature)
    offset = check_offset(offset)
    return [
        RankedClass(
            index=e.index,
            label=lookup_label(label_table, e.index, offset),
            probability=e.value,
        )
        for e in entries
    ]


class PredictionModel:
    """
    Pairs a model callable with a label table.

    ``predict_fn`` takes whatever input the model expects and returns the
    pre-softmax logits for a single example.  Loading and running the model
    are the caller's business.
    """

    def __init__(
        self,
        predict_fn: Callable[[Any], ScoreLike],
        labels: Optional[Mapping[int, str]] = None,
    ) -> None:
        self._predict_fn = predict_fn
        self._labels: Dict[int, str] = dict(labels or {})

    @property
    def labels(self) -> Dict[int, str]:
        return self._labels

    def set_labels(self, labels: Mapping[int, str]) -> None:
        # replace, never mutate: calls in flight keep their old snapshot
        self._labels = dict(labels)
        logger.info("Label table replaced ({} labels)", len(self._labels))

    def predict(self, inputs: Any) -> np.ndarray:
        """Run the model and return its logits as a validated 1-D vector."""
        return as_score_vector(self._predict_fn(inputs))

    def get_top_k_classes(
        self,
        logits: ScoreLike,
        top_k: int,
        offset: int = DEFAULT_LABEL_OFFSET,
        method: str = TOPK_METHOD,
    ) -> Dict[str, float]:
        return get_top_k_classes(logits, top_k, self._labels, offset=offset, method=method)

    def classify(
        self,
        inputs: Any,
        top_k: int,
        offset: int = DEFAULT_LABEL_OFFSET,
        method: str = TOPK_METHOD,
    ) -> Dict[str, float]:
        """predict() followed by get_top_k_classes()."""
        return self.get_top_k_classes(self.predict(inputs), top_k, offset=offset, method=method)
