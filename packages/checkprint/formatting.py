"""Value formatting: currency, CJK legal numerals, and date patterns.

``format_value`` is the single entry point used by templates. It turns a raw
cell value plus an optional format specifier into display text and never
raises for bad data:

- ``None`` formats as ``""`` regardless of the specifier.
- No specifier: the value's natural text.
- ``"currency"``: thousands separators, exactly two decimals, half away from
  zero. Values that do not coerce to a finite number format as ``""``.
- ``"cjk_upper"``: traditional Chinese legal numerals as printed on checks
  (e.g., ``壹仟貳佰參拾肆元伍角``).
- Any specifier containing ``Y``, ``M`` or ``D``: a day.js-style date pattern.
  Unparseable input falls back to the original text.
- Anything else: natural text, specifier ignored.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from .serial_dates import coerce_datetime

CURRENCY = "currency"
CJK_UPPER = "cjk_upper"
DEFAULT_DATE_FORMAT = "YYYY-MM-DD"

ZERO_AMOUNT_TEXT = "零元整"

_DIGITS = ("零", "壹", "貳", "參", "肆", "伍", "陸", "柒", "捌", "玖")
_UNITS = ("", "拾", "佰", "仟")
_SECTION_UNITS = ("", "萬", "億", "兆", "京", "垓")
_DECIMAL_UNITS = ("角", "分")
_ZERO = "零"
_YUAN = "元"
_EXACT = "整"
_NEGATIVE = "負"
# One past the largest amount the section units can spell.
_CJK_LIMIT = 10 ** (4 * len(_SECTION_UNITS))

_ZERO_RUN_RE = re.compile(f"{_ZERO}+")
_ZERO_BEFORE_SECTION_UNIT_RE = re.compile(f"{_ZERO}([{''.join(_SECTION_UNITS[1:])}])")

_CENT = Decimal("0.01")
_DATE_TOKEN_RE = re.compile(r"\[([^\]]*)\]|YYYY|YY|MM|M|DD|D|HH|H|mm|ss")


# ---------------------------------------------------------------------------
# Numeric coercion and currency
# ---------------------------------------------------------------------------


def coerce_number(value: Any) -> Decimal | None:
    """Return ``value`` as a finite ``Decimal`` or ``None`` when it is not numeric.

    Strings are trimmed and parsed as plain decimal literals; grouping
    separators and currency symbols are not accepted here (the normalizer
    strips those before parsing amounts).
    """

    if value is None:
        return None
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr() keeps the shortest round-tripping form (0.29, not 0.28999...)
        return Decimal(repr(value)) if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            d = Decimal(s)
        except InvalidOperation:
            return None
        return d if d.is_finite() else None
    return None


def format_currency(amount: Any) -> str:
    """Format a number with thousands separators and exactly two decimals."""

    d = coerce_number(amount)
    if d is None:
        return ""
    with localcontext() as ctx:
        # Room for every integer digit, two decimals and a rounding carry.
        ctx.prec = max(ctx.prec, d.adjusted() + 4)
        q = d.quantize(_CENT, rounding=ROUND_HALF_UP)
    # -0.00 keeps its sign, as in the source amount.
    return f"{q:,.2f}"


# ---------------------------------------------------------------------------
# CJK legal numerals
# ---------------------------------------------------------------------------


def _section_to_cjk(section: int) -> str:
    """Convert 1..9999 to numerals with positional units, zero runs collapsed."""

    digits: list[str] = []
    zero = True
    rest = section
    for unit in _UNITS:
        if rest == 0:
            break
        rest, digit = divmod(rest, 10)
        if digit == 0:
            if not zero:
                digits.insert(0, _ZERO)
            zero = True
        else:
            digits.insert(0, _DIGITS[digit] + unit)
            zero = False
    text = _ZERO_RUN_RE.sub(_ZERO, "".join(digits))
    return text.removesuffix(_ZERO)


def _integer_to_cjk(integer: int) -> str:
    sections: list[str] = []
    unit_pos = 0
    while integer > 0:
        integer, section = divmod(integer, 10000)
        if section:
            sections.insert(0, _section_to_cjk(section) + _SECTION_UNITS[unit_pos])
        elif sections and not sections[0].startswith(_ZERO):
            sections.insert(0, _ZERO)
        unit_pos += 1

    merged = _ZERO_RUN_RE.sub(_ZERO, "".join(sections))
    merged = _ZERO_BEFORE_SECTION_UNIT_RE.sub(r"\1", merged)
    merged = merged.lstrip(_ZERO)
    if not merged:
        return ""
    return (merged + _YUAN).replace(_ZERO + _YUAN, _YUAN)


def to_cjk_upper(amount: Any) -> str:
    """Render an amount as traditional Chinese legal numerals.

    ``0`` is ``零元整``. Amounts with no cents end in ``整``; otherwise the
    jiao (角) and fen (分) digits follow the yuan text, each only when
    non-zero. Cents that round to 100 carry into the yuan, so ``0.995`` is
    ``壹元整`` and also ends in ``整``. Negative amounts are prefixed with
    ``負``. Non-numeric or non-finite input, and amounts beyond the largest
    section unit, yield ``""``.
    """

    value = coerce_number(amount)
    if value is None:
        return ""
    if value == 0:
        return ZERO_AMOUNT_TEXT

    sign = _NEGATIVE if value < 0 else ""
    magnitude = abs(value)
    integer_part = int(magnitude)
    if integer_part >= _CJK_LIMIT:
        return ""
    cents = int(((magnitude - integer_part) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    if cents == 100:
        integer_part += 1
        cents = 0
    if integer_part >= _CJK_LIMIT:
        return ""

    integer_text = _integer_to_cjk(integer_part)
    if cents == 0:
        return f"{sign}{integer_text or _ZERO + _YUAN}{_EXACT}"

    jiao, fen = divmod(cents, 10)
    decimals = ""
    if jiao:
        decimals += _DIGITS[jiao] + _DECIMAL_UNITS[0]
    if fen:
        decimals += _DIGITS[fen] + _DECIMAL_UNITS[1]
    return f"{sign}{integer_text}{decimals}"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def is_date_pattern(spec: str) -> bool:
    return any(ch in spec for ch in "YMD")


def render_date(value: date, pattern: str) -> str:
    """Render ``value`` with day.js-style tokens; ``[...]`` escapes literals.

    ``HH``/``H``/``mm``/``ss`` read the time of a ``datetime``; a plain ``date``
    renders as midnight.
    """

    hour = value.hour if isinstance(value, datetime) else 0
    minute = value.minute if isinstance(value, datetime) else 0
    second = value.second if isinstance(value, datetime) else 0

    def _token(m: re.Match[str]) -> str:
        if m.group(1) is not None:
            return m.group(1)
        match m.group(0):
            case "YYYY":
                return f"{value.year:04d}"
            case "YY":
                return f"{value.year % 100:02d}"
            case "MM":
                return f"{value.month:02d}"
            case "M":
                return str(value.month)
            case "DD":
                return f"{value.day:02d}"
            case "D":
                return str(value.day)
            case "HH":
                return f"{hour:02d}"
            case "H":
                return str(hour)
            case "mm":
                return f"{minute:02d}"
            case _:
                return f"{second:02d}"

    return _DATE_TOKEN_RE.sub(_token, pattern)


def format_date(value: Any, pattern: str = DEFAULT_DATE_FORMAT, *, date_1904: bool = False) -> str:
    """Reformat a date-like value; unparseable input returns its original text."""

    if value is None or value == "":
        return ""
    parsed = coerce_datetime(value, date_1904=date_1904)
    if parsed is None:
        return natural_text(value)
    return render_date(parsed, pattern)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def natural_text(value: Any) -> str:
    """Plain text for a cell value (integral floats print without ``.0``)."""

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def format_value(value: Any, spec: str | None = None, *, date_1904: bool = False) -> str:
    if value is None:
        return ""
    if not spec:
        return natural_text(value)
    if spec == CURRENCY:
        return format_currency(value)
    if spec == CJK_UPPER:
        return to_cjk_upper(value)
    if is_date_pattern(spec):
        return format_date(value, spec, date_1904=date_1904)
    return natural_text(value)


__all__ = [
    "CJK_UPPER",
    "CURRENCY",
    "DEFAULT_DATE_FORMAT",
    "ZERO_AMOUNT_TEXT",
    "coerce_number",
    "format_currency",
    "format_date",
    "format_value",
    "is_date_pattern",
    "natural_text",
    "render_date",
    "to_cjk_upper",
]
