from __future__ import annotations

import asyncio
import logging
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional

import requests

from core import state as vs
from core.data import DATA_DIR, FILE_SERVER_URL, LoadError, Row, TransportError, decode_rows


logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]


def fetch_file_bytes(filename: str, base_url: str = FILE_SERVER_URL) -> bytes:
    url = f"{base_url.rstrip('/')}/{filename}"
    try:
        response = requests.get(url)
    except requests.RequestException as exc:
        raise TransportError(filename, None, str(exc)) from exc
    if not response.ok:
        raise TransportError(filename, response.status_code)
    return response.content


def read_local_bytes(filename: str, data_dir: Optional[Path] = None) -> bytes:
    path = (data_dir or DATA_DIR) / filename
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise TransportError(filename, 404, "file not found") from exc
    except OSError as exc:
        raise TransportError(filename, None, str(exc)) from exc


def http_fetcher(base_url: str = FILE_SERVER_URL) -> Fetcher:
    return partial(fetch_file_bytes, base_url=base_url)


def local_fetcher(data_dir: Optional[Path] = None) -> Fetcher:
    return partial(read_local_bytes, data_dir=data_dir)


async def load_rows(filename: str, fetch: Fetcher) -> List[Row]:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: decode_rows(fetch(filename), filename))


class ViewerSession:
    """Owns the viewer state and drives loads through the state transitions."""

    def __init__(self, fetch: Optional[Fetcher] = None, state: Optional[vs.ViewerState] = None):
        self.fetch = fetch or http_fetcher()
        self.state = state or vs.ViewerState()

    async def select_file(self, filename: str) -> vs.ViewerState:
        self.state = vs.file_selected(self.state, filename)
        seq = self.state.request_seq
        try:
            rows = await load_rows(filename, self.fetch)
        except LoadError:
            logger.exception("Error loading spreadsheet %s", filename)
            self.state = vs.load_failed(self.state, seq)
            return self.state
        if seq != self.state.request_seq:
            logger.info("Discarding stale load of %s (request %s, latest %s)", filename, seq, self.state.request_seq)
        else:
            logger.info("Loaded %d rows from %s", len(rows), filename)
        self.state = vs.load_succeeded(self.state, seq, rows)
        return self.state

    def change_query(self, query: str) -> vs.ViewerState:
        self.state = vs.query_changed(self.state, query)
        return self.state

    def next_page(self) -> vs.ViewerState:
        self.state = vs.page_delta(self.state, 1)
        return self.state

    def previous_page(self) -> vs.ViewerState:
        self.state = vs.page_delta(self.state, -1)
        return self.state

    def view(self) -> vs.TableView:
        return vs.view(self.state)
