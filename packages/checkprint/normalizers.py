"""Raw spreadsheet rows → canonical check records.

The normalizer resolves each logical role (payee, amount, date, memo) against
the row's headers, validates the required roles, coerces the amount and date,
and pre-formats the projections templates print. Bad rows never abort the
batch: each one is dropped and reported as ``"Row N: <reason>"`` where ``N``
is the spreadsheet row number (header on row 1, first data row on row 2).

Amount parsing strips every character other than digits, ``-`` and ``.``
before parsing, so ``"$1,234.50"`` and ``"NT$ 1,234.50 元"`` both read as
``1234.50``. Numeric cells are taken as-is.

Dates are optional. Only non-blank strings, finite numbers (spreadsheet
serials) and date values are considered; anything else is absent. A date that
cannot be decoded leaves the record's date empty rather than failing the row,
and nothing ever defaults to the current date.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from .formatting import (
    DEFAULT_DATE_FORMAT,
    coerce_number,
    format_currency,
    format_value,
    render_date,
    to_cjk_upper,
)
from .logging_setup import get_logger
from .models import CanonicalRecord, FieldMapping, NormalizeResult, RawRecord
from .serial_dates import coerce_datetime

_logger = get_logger("checkprint.normalizers")

_AMOUNT_NOISE_RE = re.compile(r"[^\d.\-]")

MISSING_PAYEE = "Missing payee"
INVALID_AMOUNT = "Invalid amount"

# ---------------------------------------------------------------------------
# Helpers (header lookup, amount/date coercion)
# ---------------------------------------------------------------------------


def lookup(row: RawRecord, key: str) -> Any:
    """Return the value for ``key``: exact header first, then case-insensitive.

    Returns ``None`` when no header matches or every match holds ``None``.
    """

    value = row.get(key)
    if value is not None:
        return value
    folded = key.lower()
    for header, candidate in row.items():
        if candidate is not None and isinstance(header, str) and header.lower() == folded:
            return candidate
    return None


def _parse_amount(raw: Any) -> Decimal | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, Decimal)):
        return coerce_number(raw)
    return coerce_number(_AMOUNT_NOISE_RE.sub("", str(raw)))


def _is_date_candidate(raw: Any) -> bool:
    if isinstance(raw, bool):
        return False
    if isinstance(raw, str):
        return bool(raw.strip())
    if isinstance(raw, (int, float, Decimal)):
        return coerce_number(raw) is not None
    return isinstance(raw, dt.date)


def _text_or_none(raw: Any) -> str | None:
    if raw is None:
        return None
    s = format_value(raw)
    return s if s != "" else None


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------


class RecordNormalizer:
    """Normalize raw rows into :class:`CanonicalRecord` instances.

    Usage
    -----
    result = RecordNormalizer(mapping={"payee": "Payee Name"}).normalize(rows)
    """

    def __init__(
        self,
        *,
        mapping: FieldMapping | Mapping[str, str | None] | None = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        date_1904: bool = False,
    ) -> None:
        if isinstance(mapping, FieldMapping):
            self.mapping = mapping
        else:
            self.mapping = FieldMapping().with_overrides(mapping)
        self.date_format = date_format
        self.date_1904 = date_1904

    def normalize(self, rows: Iterable[RawRecord]) -> NormalizeResult:
        records: list[CanonicalRecord] = []
        errors: list[str] = []

        for index, row in enumerate(rows):
            row_number = index + 2
            record, reason = self._normalize_row(row)
            if record is None:
                errors.append(f"Row {row_number}: {reason}")
                _logger.debug("normalize:drop row=%d reason=%s", row_number, reason)
                continue
            records.append(record)

        _logger.info("normalize:done records=%d errors=%d", len(records), len(errors))
        return NormalizeResult(records=tuple(records), errors=tuple(errors))

    def format_for_template(self, value: Any, spec: str | None = None) -> str:
        return format_value(value, spec, date_1904=self.date_1904)

    def _normalize_row(self, row: RawRecord) -> tuple[CanonicalRecord | None, str]:
        m = self.mapping

        payee = _text_or_none(lookup(row, m.payee))
        if payee is None or not payee.strip():
            return None, MISSING_PAYEE

        amount = _parse_amount(lookup(row, m.amount))
        if amount is None:
            return None, INVALID_AMOUNT

        date_text = ""
        date_value: dt.datetime | None = None
        if m.date:
            raw_date = lookup(row, m.date)
            if _is_date_candidate(raw_date):
                date_value = coerce_datetime(raw_date, date_1904=self.date_1904)
                if date_value is not None:
                    date_text = render_date(date_value, self.date_format)
                else:
                    _logger.debug("normalize:undecodable_date value=%r", raw_date)

        memo = _text_or_none(lookup(row, m.memo)) if m.memo else None

        record = CanonicalRecord(
            payee=payee,
            amount=amount,
            amount_formatted=format_currency(amount),
            amount_cjk=to_cjk_upper(amount),
            date=date_text,
            date_value=date_value,
            memo=memo,
            original=row,
        )
        return record, ""


def normalize(
    rows: Iterable[RawRecord],
    mapping: FieldMapping | Mapping[str, str | None] | None = None,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    date_1904: bool = False,
) -> NormalizeResult:
    """Normalize ``rows`` with a one-off :class:`RecordNormalizer`."""

    return RecordNormalizer(
        mapping=mapping, date_format=date_format, date_1904=date_1904
    ).normalize(rows)


__all__ = ["INVALID_AMOUNT", "MISSING_PAYEE", "RecordNormalizer", "lookup", "normalize"]
