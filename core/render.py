from __future__ import annotations

import html
from typing import TYPE_CHECKING, List, Sequence

from core.data import Row
from core.filters import cell_text
from core.pagination import Page

if TYPE_CHECKING:
    from core.state import TableView


TABLE_CSS = """
<style>
.sheet-table {border-collapse: collapse;min-width: 100%;background: #ffffff;
              box-shadow: 0 1px 2px rgba(0,0,0,0.04);border-radius: 8px;}
.sheet-table th {background: #3b82f6;color: #ffffff;text-align: left;padding: 8px 16px;border: 1px solid #e5e7eb;}
.sheet-table td {padding: 8px 16px;border: 1px solid #e5e7eb;color: #374151;}
.sheet-table tr.even {background: #f9fafb;}
.sheet-table tr.odd {background: #ffffff;}
.sheet-table tbody tr:hover {background: #dbeafe;}
.sheet-wrap {overflow-x: auto;}
</style>
"""


def table_headers(dataset: Sequence[Row]) -> List[str]:
    if not dataset:
        return []
    return list(dataset[0].keys())


def table_cells(rows: Sequence[Row]) -> List[List[str]]:
    return [[cell_text(v) for v in row.values()] for row in rows]


def page_label(page: Page) -> str:
    return f"Page {page.number} of {page.total_pages}"


def render_table_html(view: "TableView") -> str:
    head = "".join(f"<th>{html.escape(h)}</th>" for h in view.headers)
    body = []
    for idx, cells in enumerate(view.cells):
        stripe = "even" if idx % 2 == 0 else "odd"
        tds = "".join(f"<td>{html.escape(c)}</td>" for c in cells)
        body.append(f"<tr class='{stripe}'>{tds}</tr>")
    return (
        "<div class='sheet-wrap'><table class='sheet-table'>"
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody>{''.join(body)}</tbody>"
        "</table></div>"
    )
