# topk_classifier/_singletons.py
from functools import lru_cache
from typing import Dict

from loguru import logger

from .config import LABELS_PATH
from .labels import load_label_table


@lru_cache(maxsize=1)
def get_label_table() -> Dict[int, str]:
    if not LABELS_PATH.exists():
        logger.warning("Label table {} missing; requests must supply their own labels.", LABELS_PATH)
        return {}
    return load_label_table(LABELS_PATH)
