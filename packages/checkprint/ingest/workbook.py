"""Load spreadsheet files into :class:`~checkprint.models.Sheet` values.

- ``.xlsx``/``.xlsm`` files are read with ``openpyxl`` (read-only, cached
  formula values). The first row is the header row; blank header cells get
  positional names (``__col_<n>``). Blank cells become ``""``; fully blank rows
  are skipped. ``Sheet.date1904`` follows the workbook's epoch setting.
- ``.csv`` files are read with :mod:`csv` (UTF-8, BOM tolerated) into a single
  sheet named after the file stem.
"""

from __future__ import annotations

import csv
from os import PathLike
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.datetime import CALENDAR_MAC_1904

from ..logging_setup import get_logger
from ..models import RawRecord, Sheet

_logger = get_logger("checkprint.ingest.workbook")

_XLSX_SUFFIXES = {".xlsx", ".xlsm"}


def _header_names(cells: tuple[Any, ...]) -> tuple[str, ...]:
    names: list[str] = []
    for pos, cell in enumerate(cells, start=1):
        text = "" if cell is None else str(cell).strip()
        names.append(text or f"__col_{pos}")
    return tuple(names)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def read_xlsx(path: str | PathLike[str]) -> list[Sheet]:
    """Read every worksheet of an ``.xlsx`` workbook."""

    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        date1904 = wb.epoch == CALENDAR_MAC_1904
        sheets: list[Sheet] = []
        for ws in wb.worksheets:
            rows = ws.iter_rows(values_only=True)
            first = next(rows, None)
            if first is None:
                sheets.append(Sheet(name=ws.title, headers=(), records=(), date1904=date1904))
                continue
            headers = _header_names(first)
            records: list[RawRecord] = []
            for values in rows:
                if all(_is_blank(v) for v in values):
                    continue
                padded = tuple(values) + (None,) * (len(headers) - len(values))
                records.append(
                    {h: ("" if v is None else v) for h, v in zip(headers, padded, strict=False)}
                )
            sheets.append(
                Sheet(name=ws.title, headers=headers, records=tuple(records), date1904=date1904)
            )
    finally:
        wb.close()

    _logger.info("ingest:xlsx path=%s sheets=%d", Path(path).name, len(sheets))
    return sheets


def read_csv(path: str | PathLike[str]) -> list[Sheet]:
    """Read a CSV file as a single sheet."""

    p = Path(path)
    with p.open(encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        headers = tuple(reader.fieldnames or ())
        records: list[RawRecord] = []
        for row in reader:
            # DictReader collects surplus cells under a None key; drop them.
            cleaned = {k: (v if v is not None else "") for k, v in row.items() if k is not None}
            if all(_is_blank(v) for v in cleaned.values()):
                continue
            records.append(cleaned)

    _logger.info("ingest:csv path=%s rows=%d", p.name, len(records))
    return [Sheet(name=p.stem, headers=headers, records=tuple(records))]


def load_sheets(path: str | PathLike[str]) -> list[Sheet]:
    """Dispatch on file suffix; raises ``ValueError`` for unsupported files."""

    suffix = Path(path).suffix.lower()
    if suffix in _XLSX_SUFFIXES:
        return read_xlsx(path)
    if suffix == ".csv":
        return read_csv(path)
    raise ValueError(f"Unsupported spreadsheet file type: {suffix or '(none)'}")


def select_sheet(sheets: list[Sheet], name: str | None = None) -> Sheet:
    """Return the named sheet, or the first sheet when ``name`` is ``None``."""

    if not sheets:
        raise ValueError("Workbook contains no sheets")
    if name is None:
        return sheets[0]
    for sheet in sheets:
        if sheet.name == name:
            return sheet
    raise ValueError(f"Sheet not found: {name!r}. Available: {[s.name for s in sheets]}")


__all__ = ["load_sheets", "read_csv", "read_xlsx", "select_sheet"]
