"""Spreadsheet date serials and date coercion.

Spreadsheet files store dates as a count of days since an epoch. Two epoch
systems are in use:

- The default (1900) system, where serial ``1`` is 1900-01-01. It carries a
  fabricated 1900-02-29 at serial ``60`` inherited from early spreadsheet
  software; every serial after it is shifted by one day. Serial ``60`` has no
  calendar counterpart and decodes as invalid.
- The 1904 system, where serial ``0`` is 1904-01-01 and no leap day is
  fabricated.

Everything here works on naive ``date``/``datetime`` values with plain day
and second arithmetic, so local timezone and DST rules never move the result.

``coerce_datetime`` is the single date-inference path shared by the
normalizer, the formatter and the field resolver: dates pass through, finite
numbers and numeric-looking strings are serials (the fraction is the time of
day), and other strings are parsed as calendar text. ``coerce_date`` is its
day-only form.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

_EPOCH_1900 = date(1899, 12, 31)
_EPOCH_1904 = date(1904, 1, 1)
_FAKE_LEAP_DAY = 60
_SECONDS_PER_DAY = 86_400

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

# Tried in order after ISO 8601.
_TEXT_FORMATS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y年%m月%d日",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def decode_serial(serial: float | int | Decimal, *, date_1904: bool = False) -> date | None:
    """Return the calendar date for a spreadsheet serial, or ``None`` if invalid.

    Fractional serials (time of day) are truncated to the day. ``None`` is
    returned for non-finite input, negative serials, the fabricated leap day
    in the 1900 system, and serials past the end of the supported calendar.
    """

    if isinstance(serial, bool):
        return None
    try:
        value = float(serial)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None

    days = math.floor(value)
    if date_1904:
        anchor = _EPOCH_1904
    else:
        if days == _FAKE_LEAP_DAY:
            return None
        if days > _FAKE_LEAP_DAY:
            days -= 1
        anchor = _EPOCH_1900
    try:
        return anchor + timedelta(days=days)
    except OverflowError:
        return None


def encode_serial(value: date, *, date_1904: bool = False) -> int:
    """Return the spreadsheet serial for ``value`` (inverse of ``decode_serial``)."""

    if isinstance(value, datetime):
        value = value.date()
    if date_1904:
        return (value - _EPOCH_1904).days
    days = (value - _EPOCH_1900).days
    # Dates from 1900-03-01 onward sit one past their day count.
    return days + 1 if days >= _FAKE_LEAP_DAY else days


def decode_serial_datetime(
    serial: float | int | Decimal, *, date_1904: bool = False
) -> datetime | None:
    """Like :func:`decode_serial`, keeping the fraction as the time of day.

    The fraction is rounded to the nearest second and clamped to the same day.
    """

    day = decode_serial(serial, date_1904=date_1904)
    if day is None:
        return None
    value = float(serial)
    seconds = min(round((value - math.floor(value)) * _SECONDS_PER_DAY), _SECONDS_PER_DAY - 1)
    return datetime.combine(day, time()) + timedelta(seconds=seconds)


def parse_datetime_text(text: str) -> datetime | None:
    """Parse calendar text, keeping any ISO 8601 time; ``None`` when nothing matches.

    Offsets are dropped, leaving the wall-clock time as written.
    """

    s = text.strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s).replace(tzinfo=None)
    except ValueError:
        pass
    for fmt in _TEXT_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    return None


def parse_date_text(text: str) -> date | None:
    """Parse calendar text into a date; ``None`` when no known layout matches."""

    moment = parse_datetime_text(text)
    return moment.date() if moment is not None else None


def coerce_datetime(value: Any, *, date_1904: bool = False) -> datetime | None:
    """Infer a date and time of day from a raw cell value.

    - ``datetime`` values pass through; ``date`` values are at midnight.
    - Finite numbers are spreadsheet serials; the fraction is the time.
    - Numeric-looking strings are spreadsheet serials; other strings are
      parsed as calendar text (ISO 8601 keeps its time).
    - Anything else, including blank strings and containers, is absent.
    """

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return decode_serial_datetime(value, date_1904=date_1904)
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if _NUMERIC_RE.match(s):
            return decode_serial_datetime(float(s), date_1904=date_1904)
        return parse_datetime_text(s)
    return None


def coerce_date(value: Any, *, date_1904: bool = False) -> date | None:
    """Calendar day of :func:`coerce_datetime`; the time of day is dropped."""

    moment = coerce_datetime(value, date_1904=date_1904)
    return moment.date() if moment is not None else None


__all__ = [
    "coerce_date",
    "coerce_datetime",
    "decode_serial",
    "decode_serial_datetime",
    "encode_serial",
    "parse_date_text",
    "parse_datetime_text",
]
