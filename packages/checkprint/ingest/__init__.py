"""Ingestion adapters that turn spreadsheet files into raw rows."""

from .workbook import load_sheets, read_csv, read_xlsx, select_sheet

__all__ = ["load_sheets", "read_csv", "read_xlsx", "select_sheet"]
