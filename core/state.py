"""Viewer state and its transitions.

Every transition is a pure function returning a new ``ViewerState``. Loads are
tagged with ``request_seq``; a completion whose sequence number is not the
latest request is dropped, so a slow response can never overwrite the data
of a newer selection.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence, Tuple

from core.data import DEFAULT_FILE, FILE_LIST, PAGE_SIZE, Row
from core.filters import filter_rows, normalize_query
from core.pagination import Page, next_page, paginate, previous_page, total_pages
from core.render import table_cells, table_headers


@dataclass(frozen=True)
class ViewerState:
    files: Tuple[str, ...] = FILE_LIST
    selected_file: str = DEFAULT_FILE
    query: str = ""
    page: int = 1
    page_size: int = PAGE_SIZE
    dataset: Tuple[Row, ...] = ()
    request_seq: int = 0
    loading: bool = False


@dataclass(frozen=True)
class TableView:
    headers: List[str]
    cells: List[List[str]]
    page: Page
    query: str = ""
    selected_file: str = ""


def file_selected(state: ViewerState, filename: str) -> ViewerState:
    if filename not in state.files:
        raise ValueError(f"unknown file: {filename!r}")
    return replace(
        state,
        selected_file=filename,
        page=1,
        request_seq=state.request_seq + 1,
        loading=True,
    )


def query_changed(state: ViewerState, query: str) -> ViewerState:
    return replace(state, query=normalize_query(query), page=1)


def filtered_rows(state: ViewerState) -> List[Row]:
    return filter_rows(state.dataset, state.query)


def page_delta(state: ViewerState, delta: int) -> ViewerState:
    """Move ``delta`` pages, one step at a time; steps past either bound are no-ops."""
    pages = total_pages(len(filtered_rows(state)), state.page_size)
    page = state.page
    for _ in range(abs(delta)):
        page = next_page(page, pages) if delta > 0 else previous_page(page)
    if page == state.page:
        return state
    return replace(state, page=page)


def _is_current(state: ViewerState, seq: int) -> bool:
    return seq == state.request_seq


def load_succeeded(state: ViewerState, seq: int, rows: Iterable[Row]) -> ViewerState:
    if not _is_current(state, seq):
        return state
    return replace(state, dataset=tuple(rows), page=1, loading=False)


def load_failed(state: ViewerState, seq: int) -> ViewerState:
    if not _is_current(state, seq):
        return state
    return replace(state, dataset=(), page=1, loading=False)


def build_view(
    dataset: Sequence[Row],
    query: str,
    page: int,
    page_size: int = PAGE_SIZE,
    selected_file: str = "",
) -> TableView:
    rows = filter_rows(dataset, query)
    current = paginate(rows, page, page_size)
    return TableView(
        headers=table_headers(dataset),
        cells=table_cells(current.rows),
        page=current,
        query=normalize_query(query),
        selected_file=selected_file,
    )


def view(state: ViewerState) -> TableView:
    return build_view(state.dataset, state.query, state.page, state.page_size, state.selected_file)
