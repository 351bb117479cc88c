from __future__ import annotations

import io
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd


DATA_DIR = Path(__file__).resolve().parents[1] / "public"
FILE_LIST: Tuple[str, ...] = (
    "Execution-Dates.xlsx",
    "Financial_Sample.xlsx",
    "Employees-Table.xlsx",
    "Budget_vs_Actual.xlsx",
)
DEFAULT_FILE = FILE_LIST[0]
PAGE_SIZE = 10
FILE_SERVER_URL = "http://127.0.0.1:8000"

MEDIA_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".csv": "text/csv",
}

CellValue = Union[str, int, float, bool, None]
Row = Dict[str, CellValue]


class LoadError(Exception):
    """Base class for failures while loading a dataset."""


class TransportError(LoadError):
    def __init__(self, filename: str, status: Optional[int] = None, detail: str = ""):
        self.filename = filename
        self.status = status
        msg = f"could not fetch {filename}"
        if status is not None:
            msg += f" (HTTP error! status: {status})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class DecodeError(LoadError):
    def __init__(self, filename: str, detail: str = ""):
        self.filename = filename
        super().__init__(f"could not decode {filename or 'spreadsheet'}: {detail}")


def media_type_for(filename: str) -> str:
    return MEDIA_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")


def native_cell(value: object) -> CellValue:
    """Convert a pandas/numpy cell into a plain Python value (None for blanks)."""
    if value is None:
        return None
    if isinstance(value, (pd.Timestamp, datetime)):
        if pd.isna(value):
            return None
        ts = pd.Timestamp(value)
        if ts == ts.normalize():
            return ts.date().isoformat()
        return ts.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        out = float(value)
        if np.isnan(out):
            return None
        if out.is_integer():
            return int(out)
        return out
    if value is pd.NA:
        return None
    return str(value)


def rows_from_frame(df: pd.DataFrame) -> List[Row]:
    if df.empty:
        return []
    df = df.dropna(how="all")
    columns = [str(c) for c in df.columns]
    rows: List[Row] = []
    for values in df.itertuples(index=False, name=None):
        rows.append({col: native_cell(v) for col, v in zip(columns, values)})
    return rows


def _is_csv(filename: str) -> bool:
    return Path(filename).suffix.lower() == ".csv"


def decode_rows(raw: bytes, filename: str = "") -> List[Row]:
    """Decode spreadsheet bytes into rows keyed by the header row.

    The first sheet is canonical. CSV files are recognised by their suffix.
    """
    try:
        if _is_csv(filename):
            df = pd.read_csv(io.BytesIO(raw))
        else:
            df = pd.read_excel(io.BytesIO(raw), sheet_name=0, header=0)
    except pd.errors.EmptyDataError:
        return []
    except Exception as exc:
        raise DecodeError(filename, str(exc)) from exc
    return rows_from_frame(df)


def list_sheets(raw: bytes, filename: str = "") -> List[str]:
    if _is_csv(filename):
        return [Path(filename).stem]
    try:
        with pd.ExcelFile(io.BytesIO(raw)) as book:
            return [str(name) for name in book.sheet_names]
    except Exception as exc:
        raise DecodeError(filename, str(exc)) from exc


def rows_to_csv(rows: Iterable[Row], headers: Optional[List[str]] = None) -> bytes:
    rows = list(rows)
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    df = pd.DataFrame(rows, columns=headers)
    return df.to_csv(index=False).encode("utf-8")


# ---------------- Server-side file access ----------------
def resolve_file(filename: str, data_dir: Optional[Path] = None) -> Path:
    """Map a selectable filename to its path, rejecting names outside FILE_LIST."""
    if filename not in FILE_LIST:
        raise TransportError(filename, 404, "not in file list")
    return (data_dir or DATA_DIR) / filename


def get_source_files(data_dir: Optional[Path] = None) -> List[Path]:
    base = data_dir or DATA_DIR
    return [base / name for name in FILE_LIST if (base / name).is_file()]


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


@lru_cache(maxsize=8)
def _load_dataset_cached(path_sig: Tuple[str, float]) -> Tuple[Row, ...]:
    path = Path(path_sig[0])
    return tuple(decode_rows(path.read_bytes(), path.name))


def load_dataset(filename: str, data_dir: Optional[Path] = None) -> Tuple[Row, ...]:
    path = resolve_file(filename, data_dir)
    if not path.is_file():
        raise TransportError(filename, 404, "file not found")
    return _load_dataset_cached(file_signature([path])[0])


def load_sheet_names(filename: str, data_dir: Optional[Path] = None) -> List[str]:
    path = resolve_file(filename, data_dir)
    if not path.is_file():
        raise TransportError(filename, 404, "file not found")
    return list_sheets(path.read_bytes(), filename)
