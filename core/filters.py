from __future__ import annotations

from typing import Iterable, List, Optional

from core.data import CellValue, Row


def cell_text(value: CellValue) -> str:
    """Text form of a cell as shown in the table and matched by search."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_query(raw: Optional[str]) -> str:
    return raw or ""


def row_matches(row: Row, query: str) -> bool:
    needle = normalize_query(query).lower()
    if not needle:
        return True
    return any(needle in cell_text(v).lower() for v in row.values())


def filter_rows(rows: Iterable[Row], query: Optional[str]) -> List[Row]:
    # Blank cells are "" and therefore only match the empty query.
    q = normalize_query(query)
    return [row for row in rows if row_matches(row, q)]
