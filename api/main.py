from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
import uvicorn
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response
from fastapi.encoders import jsonable_encoder

from api.schemas import FileListResponse, RowsRequestModel, RowsResponse, SheetListResponse
from core import data as core_data
from core.data import (
    DecodeError,
    FILE_LIST,
    DEFAULT_FILE,
    PAGE_SIZE,
    TransportError,
    get_source_files,
    load_dataset,
    load_sheet_names,
    rows_to_csv,
)
from core.filters import filter_rows
from core.pagination import clamp_page, total_pages
from core.render import table_headers
from core.state import build_view


app = FastAPI(title="Sheet Viewer API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:8501"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _json(data: object, status_code: int = 200) -> JSONResponse:
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
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _load_error_response(exc: Exception) -> JSONResponse:
    if isinstance(exc, TransportError):
        return _error(exc, exc.status or 502)
    return _error(exc, 422)


@app.get("/meta/files")
def meta_files():
    available = [path.name for path in get_source_files()]
    payload = FileListResponse(files=list(FILE_LIST), available=available, default=DEFAULT_FILE, page_size=PAGE_SIZE)
    return _json(payload.model_dump())


@app.get("/meta/sheets")
def meta_sheets(file: str = Query(default=DEFAULT_FILE)):
    try:
        sheets = load_sheet_names(file)
        return _json(SheetListResponse(file=file, sheets=sheets).model_dump())
    except (TransportError, DecodeError) as exc:
        logger.warning("meta_sheets failed for %s: %s", file, exc)
        return _load_error_response(exc)
    except Exception as exc:
        logger.exception("meta_sheets failed")
        return _error(exc, 500)


@app.post("/rows")
def rows(request: RowsRequestModel):
    try:
        dataset = load_dataset(request.file)
        pages = total_pages(len(filter_rows(dataset, request.query)), PAGE_SIZE)
        table = build_view(dataset, request.query, clamp_page(request.page, pages), PAGE_SIZE, request.file)
        payload = RowsResponse(
            file=request.file,
            query=table.query,
            headers=table.headers,
            cells=table.cells,
            rows=table.page.rows,
            page=table.page.number,
            page_size=table.page.page_size,
            total_pages=table.page.total_pages,
            total_rows=table.page.total_rows,
            has_previous=table.page.has_previous,
            has_next=table.page.has_next,
        )
        return _json(payload.model_dump())
    except (TransportError, DecodeError) as exc:
        logger.warning("rows failed for %s: %s", request.file, exc)
        return _load_error_response(exc)
    except Exception as exc:
        logger.exception("rows failed")
        return _error(exc, 500)


@app.post("/export")
def export_rows(request: RowsRequestModel):
    try:
        dataset = load_dataset(request.file)
    except (TransportError, DecodeError) as exc:
        logger.warning("export failed for %s: %s", request.file, exc)
        return _load_error_response(exc)
    try:
        filtered = filter_rows(dataset, request.query)
        csv_bytes = rows_to_csv(filtered, table_headers(dataset))
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc, 500)
    filename = request.file.rsplit(".", 1)[0] + ".csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


# Catch-all path: must stay the last route.
@app.get("/{filename}")
def static_file(filename: str):
    try:
        path = core_data.resolve_file(filename)
    except TransportError as exc:
        return _error(exc, 404)
    if not path.is_file():
        logger.warning("static file missing on disk: %s", path)
        return _error(TransportError(filename, 404, "file not found"), 404)
    return FileResponse(path, media_type=core_data.media_type_for(filename), filename=filename)


def run(host: str = "127.0.0.1", port: int = 8000) -> None:
    """Serve the API (and the static files) with uvicorn."""
    uvicorn.run(app, host=host, port=port)
