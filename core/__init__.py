"""Core (UI-agnostic) viewer logic.

This package contains:
- spreadsheet decoding (XLSX/CSV bytes -> rows via pandas)
- search filter and paginator
- table rendering helpers
- viewer state transitions and the async loader session
"""
