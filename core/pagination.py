from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

from core.data import PAGE_SIZE, Row


@dataclass(frozen=True)
class Page:
    rows: List[Row] = field(default_factory=list)
    number: int = 1
    total_pages: int = 0
    total_rows: int = 0
    page_size: int = PAGE_SIZE

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def _check_page_size(page_size: int) -> None:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    _check_page_size(page_size)
    return math.ceil(count / page_size)


def next_page(page: int, pages: int) -> int:
    return page + 1 if page < pages else page


def previous_page(page: int) -> int:
    return page - 1 if page > 1 else page


def clamp_page(page: int, pages: int) -> int:
    return max(1, min(page, max(pages, 1)))


def paginate(rows: Sequence[Row], page: int, page_size: int = PAGE_SIZE) -> Page:
    """Slice ``rows`` for a 1-indexed page.

    Zero rows give ``total_pages == 0`` and an empty page 1.
    """
    pages = total_pages(len(rows), page_size)
    start = (page - 1) * page_size
    chunk = list(rows[start : start + page_size]) if page >= 1 else []
    return Page(rows=chunk, number=page, total_pages=pages, total_rows=len(rows), page_size=page_size)
