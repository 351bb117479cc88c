from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from core.data import DEFAULT_FILE


class RowsRequestModel(BaseModel):
    file: str = DEFAULT_FILE
    query: str = ""
    page: int = 1


class FileListResponse(BaseModel):
    files: List[str]
    available: List[str] = Field(default_factory=list)
    default: str
    page_size: int


class SheetListResponse(BaseModel):
    file: str
    sheets: List[str]


class RowsResponse(BaseModel):
    file: str
    query: str
    headers: List[str] = Field(default_factory=list)
    cells: List[List[str]] = Field(default_factory=list)
    rows: List[dict] = Field(default_factory=list)
    page: int = 1
    page_size: int
    total_pages: int = 0
    total_rows: int = 0
    has_previous: bool = False
    has_next: bool = False
