from __future__ import annotations

"""
FastAPI application exposing the top-K post-processing core.

- POST /classify turns a score vector into {label: probability}
- labels come from the request body, else from the table loaded at startup
- each failure kind maps to its own status code so clients can tell them apart
"""

from typing import Dict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .classify import rank_classes
from .config import (
    ClassifyRequest,
    ClassifyResponse,
    ErrorDetail,
    HealthResponse,
    RankedClassModel,
)
from .errors import ClassificationError, InvalidInput, LabelLookupError, NumericError
from ._singletons import get_label_table


# -----------------------
# Error mapping
# -----------------------

_STATUS_BY_ERROR = (
    (InvalidInput, 400, "invalid_input"),
    (NumericError, 422, "numeric_error"),
    (LabelLookupError, 404, "label_lookup_error"),
)


def _to_http_error(exc: ClassificationError) -> HTTPException:
    for cls, status, kind in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            detail = ErrorDetail(error=kind, message=str(exc))
            return HTTPException(status_code=status, detail=detail.model_dump())
    detail = ErrorDetail(error="classification_error", message=str(exc))
    return HTTPException(status_code=400, detail=detail.model_dump())


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_label_table: Dict[int, str] = {}


@app.on_event("startup")
def startup_event() -> None:
    global _label_table
    logger.info("Starting app warmup...")
    try:
        _label_table = get_label_table()
    except (OSError, InvalidInput) as e:
        _label_table = {}
        logger.warning("Failed to load default label table: {}", e)
    logger.info("Warmup complete ({} labels).", len(_label_table))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy", labels_loaded=len(_label_table))


@app.post("/classify", response_model=ClassifyResponse)
def classify(req: ClassifyRequest) -> ClassifyResponse:
    labels = req.labels if req.labels is not None else _label_table

    try:
        ranked = rank_classes(req.scores, req.top_k, labels, offset=req.offset, method=req.method)
    except LabelLookupError as e:
        # score and k validation already passed; an empty table is a missing resource
        if not labels:
            detail = ErrorDetail(error="labels_unavailable", message="No label table loaded or supplied")
            raise HTTPException(status_code=503, detail=detail.model_dump()) from e
        logger.warning("Classification failed: {}", e)
        raise _to_http_error(e) from e
    except ClassificationError as e:
        logger.warning("Classification failed: {}", e)
        raise _to_http_error(e) from e

    classes: Dict[str, float] = {}
    for rc in ranked:
        classes[rc.label] = rc.probability
    return ClassifyResponse(
        classes=classes,
        ranking=[
            RankedClassModel(index=rc.index, label=rc.label, probability=rc.probability)
            for rc in ranked
        ],
    )
