from __future__ import annotations

import logging
import math
from typing import List, Literal, Tuple

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, Query, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import ChartOptionsModel, DatasetsResponse, MetaOptionsResponse
from csv_chart.alignment import NORMALIZATION_METHODS
from csv_chart.data import COLORS
from csv_chart.options import DEFAULT_POINT_RADIUS, DEFAULT_TITLE, normalize_options
from csv_chart.payload import compute_chart, compute_tables, export_csv
from csv_chart.session import DatasetCollection, error_message


app = FastAPI(title="Simple CSV Chart API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(status_code: int, message: str, kind: str, **extra: object) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "type": kind, **extra})


def _collect(files: List[UploadFile]) -> Tuple[DatasetCollection, List[str]]:
    """Parse every upload into a fresh collection; requests share no state."""
    collection = DatasetCollection()
    uploads = [(f.filename or "upload.csv", f.file.read()) for f in files]
    errors = collection.add_uploads(uploads)
    return collection, errors


def _no_data(errors: List[str]) -> JSONResponse:
    return _error(422, error_message(errors) or "No files uploaded.", "CsvParseError", errors=errors)


@app.get("/meta/options", response_model=MetaOptionsResponse)
def meta_options():
    return MetaOptionsResponse(palette=list(COLORS), normalization_methods=list(NORMALIZATION_METHODS))


@app.post("/datasets")
def datasets(files: List[UploadFile] = File(...)):
    try:
        collection, errors = _collect(files)
        if collection.is_empty:
            return _no_data(errors)
        body = DatasetsResponse(
            files=collection.summary(),
            tables=compute_tables(collection),
            errors=errors,
            error=error_message(errors) or None,
        )
        return _json(body.model_dump())
    except Exception as exc:
        logger.exception("datasets failed")
        return _error(500, str(exc), type(exc).__name__)


@app.post("/chart")
def chart(
    files: List[UploadFile] = File(...),
    normalization: Literal["max", "minmax"] = Query(default="max"),
    title: str = Query(default=DEFAULT_TITLE),
    show_points: bool = Query(default=True),
    point_radius: int = Query(default=DEFAULT_POINT_RADIUS),
):
    try:
        collection, errors = _collect(files)
        if collection.is_empty:
            return _no_data(errors)
        raw = ChartOptionsModel(
            normalization=normalization,
            title=title,
            show_points=show_points,
            point_radius=point_radius,
        ).model_dump()
        payload = compute_chart(collection, normalize_options(raw))
        payload["errors"] = errors
        return _json(payload)
    except Exception as exc:
        logger.exception("chart failed")
        return _error(500, str(exc), type(exc).__name__)


@app.post("/export")
def export(files: List[UploadFile] = File(...)):
    try:
        collection, errors = _collect(files)
        if collection.is_empty:
            return _no_data(errors)
        return Response(
            content=export_csv(collection),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=aligned.csv"},
        )
    except Exception as exc:
        logger.exception("export failed")
        return _error(500, str(exc), type(exc).__name__)
