from __future__ import annotations

"""
Label resolution: selected class indices -> human-readable labels.

The label table is owned by the caller and only read here; nothing is
cached between calls, so a caller whose table changes just passes the new
mapping on the next call.
"""

import json
from pathlib import Path
from typing import Dict, Iterable, Mapping

import numpy as np
from loguru import logger

from .errors import InvalidInput, LabelLookupError
from .topk import RankedEntry


def check_offset(offset) -> int:
    if isinstance(offset, bool) or not isinstance(offset, (int, np.integer)):
        raise InvalidInput(f"offset must be an integer, got {type(offset).__name__}")
    return int(offset)


def lookup_label(label_table: Mapping[int, str], index: int, offset: int = 0) -> str:
    """Return the label for class ``index`` shifted by ``offset``."""
    try:
        return label_table[index + offset]
    except KeyError:
        raise LabelLookupError(index, offset) from None


def resolve_labels(
    entries: Iterable[RankedEntry],
    label_table: Mapping[int, str],
    offset: int = 0,
) -> Dict[str, float]:
    """
    Map ranked entries to ``{label: value}`` in rank order.

    ``label_table[entry.index + offset]`` is looked up for every entry.  A
    missing key fails the whole call with LabelLookupError; no partial
    mapping is returned.  If two entries resolve to the same label, the
    later (lower ranked) value wins.
    """
    offset = check_offset(offset)
    out: Dict[str, float] = {}
    for entry in entries:
        key = entry.index + offset
        label = lookup_label(label_table, entry.index, offset)
        if label in out:
            logger.warning(
                "Duplicate label {!r} at key {}; overwriting {:.6f} with {:.6f}",
                label, key, out[label], entry.value,
            )
        out[label] = entry.value
    return out


def _parse_label_json(raw) -> Dict[int, str]:
    if isinstance(raw, dict):
        try:
            return {int(k): str(v) for k, v in raw.items()}
        except ValueError as e:
            raise InvalidInput(f"Label table keys must be integers: {e}") from e
    if isinstance(raw, list):
        return {i: str(v) for i, v in enumerate(raw)}
    raise InvalidInput(f"Label table must be a JSON object or list, got {type(raw).__name__}")


def load_label_table(path: Path) -> Dict[int, str]:
    """
    Read a label table from disk.

    Supported layouts:
      - ``.json`` object: ``{"0": "tench", "1": "goldfish", ...}``
      - ``.json`` list: label at list position i is class i
      - anything else: plain text, one label per line (blank lines skipped
        only at the end of the file so positions stay aligned)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Label table not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidInput(f"Malformed label table {path}: {e}") from e
        table = _parse_label_json(raw)
    else:
        lines = text.rstrip().split("\n") if text.strip() else []
        table = {i: line.strip() for i, line in enumerate(lines)}

    logger.info("Loaded {} labels from {}", len(table), path)
    return table
