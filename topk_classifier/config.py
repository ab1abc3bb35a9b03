from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
LABELS_PATH = Path(os.getenv("TOPK_LABELS_PATH", str(DATA_DIR / "labels.json")))


# ---------------------------
# Post-processing settings
# ---------------------------

DEFAULT_TOP_K = int(os.getenv("TOPK_DEFAULT_K", "5"))
DEFAULT_LABEL_OFFSET = int(os.getenv("TOPK_LABEL_OFFSET", "0"))

# "sort" (stable full sort) or "heap" (bounded selection, same output)
TOPK_METHODS = ("sort", "heap")
TOPK_METHOD = os.getenv("TOPK_METHOD", "sort")

SOFTMAX_TEMPERATURE = 1.0
PROBABILITY_SUM_TOLERANCE = 1e-5

# input cap for the HTTP surface
MAX_CLASSES = 100_000


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class ClassifyRequest(BaseModel):
    """
    Request body for POST /classify.
    ``labels`` keys arrive as strings in JSON; pydantic coerces them to int.
    """

    scores: List[float] = Field(..., max_length=MAX_CLASSES)
    top_k: int = Field(DEFAULT_TOP_K, ge=0)
    offset: int = DEFAULT_LABEL_OFFSET
    labels: Optional[Dict[int, str]] = None
    method: str = TOPK_METHOD


class RankedClassModel(BaseModel):
    index: int
    label: str
    probability: float = Field(ge=0.0, le=1.0)


class ClassifyResponse(BaseModel):
    """
    Response body for POST /classify.
    ``classes`` maps label -> probability, ``ranking`` keeps the rank order
    and the class indices.
    """

    classes: Dict[str, float]
    ranking: List[RankedClassModel]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
    labels_loaded: int = 0


class ErrorDetail(BaseModel):
    error: str
    message: str
