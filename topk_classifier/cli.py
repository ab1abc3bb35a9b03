# topk_classifier/cli.py
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
from loguru import logger

from .classify import rank_classes
from .config import DEFAULT_LABEL_OFFSET, DEFAULT_TOP_K, LABELS_PATH, TOPK_METHOD, TOPK_METHODS
from .errors import ClassificationError, InvalidInput
from .labels import load_label_table


def read_scores(path: Path) -> np.ndarray:
    """Read a score vector from a ``.npy`` array or a JSON list."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() == ".npy":
        return np.load(path, allow_pickle=False)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Malformed score file {path}: {e}") from e
    if not isinstance(raw, list):
        raise InvalidInput(f"Expected a JSON list of scores in {path}, got {type(raw).__name__}")
    return np.asarray(raw, dtype=np.float64)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Rank the top-K classes of a logit vector.")
    parser.add_argument("--scores", required=True, type=Path, help="Path to .json or .npy logits")
    parser.add_argument("--labels", type=Path, default=LABELS_PATH, help="Label table (.json or .txt)")
    parser.add_argument("-k", "--top-k", type=int, default=DEFAULT_TOP_K)
    parser.add_argument("--offset", type=int, default=DEFAULT_LABEL_OFFSET)
    parser.add_argument("--method", choices=TOPK_METHODS, default=TOPK_METHOD)
    args = parser.parse_args(argv)

    try:
        scores = read_scores(args.scores)
        labels = load_label_table(args.labels)
        ranked = rank_classes(scores, args.top_k, labels, offset=args.offset, method=args.method)
    except FileNotFoundError as e:
        logger.error("{}", e)
        return 1
    except ClassificationError as e:
        logger.error("Classification failed: {}", e)
        return 2

    for rc in ranked:
        print(f"{rc.label}\t{rc.probability:.6f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
