"""Data models and type aliases for ``checkprint``.

Raw rows are kept as opaque mappings from column header to cell value, the
same shape an ingestion adapter produces. Normalization turns them into
:class:`CanonicalRecord` instances, which carry the coerced amount, its
pre-formatted projections, and a back-reference to the raw row so templates
can still reach columns outside the fixed role set.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal
from typing import Any

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

type RawRecord = Mapping[str, Any]
"""A single spreadsheet row keyed by column header.

Keys are whatever the source sheet produced; case and presence are not
guaranteed. Values are scalars (``str``, numbers, dates) or ``None``.
"""


@dataclass(frozen=True, slots=True)
class Sheet:
    """One named sheet from an ingested workbook.

    ``date1904`` reports the workbook's epoch system so numeric date serials
    from this sheet can be decoded correctly.
    """

    name: str
    headers: tuple[str, ...]
    records: tuple[RawRecord, ...]
    date1904: bool = False


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldMapping:
    """Logical roles bound to expected column headers.

    ``payee`` and ``amount`` are required roles. ``date`` and ``memo`` are
    optional; binding them to ``None`` disables the role. Header matching is
    exact first, then case-insensitive (see ``normalizers.lookup``).
    """

    payee: str = "payee"
    amount: str = "amount"
    date: str | None = "date"
    memo: str | None = "memo"

    @classmethod
    def roles(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_overrides(self, overrides: Mapping[str, str | None] | None) -> FieldMapping:
        """Return a copy with ``overrides`` applied; unknown roles are rejected."""

        if not overrides:
            return self
        unknown = sorted(set(overrides) - set(self.roles()))
        if unknown:
            raise ValueError(
                f"Unknown mapping role(s): {unknown}. Allowed: {list(self.roles())}"
            )
        for role in ("payee", "amount"):
            if role in overrides and not overrides[role]:
                raise ValueError(f"Mapping role {role!r} is required and cannot be empty")
        return replace(self, **dict(overrides))


# ---------------------------------------------------------------------------
# Canonical records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """A validated row, pre-formatted for direct template consumption.

    Attributes
    ----------
    payee:
        Non-empty payee text.
    amount:
        The coerced amount; always finite.
    amount_formatted:
        ``amount`` with thousands separators and two decimals.
    amount_cjk:
        ``amount`` in CJK legal numerals.
    date:
        The date formatted with the normalizer's pattern, or ``""`` when the
        row had no usable date.
    date_value:
        The decoded moment behind ``date`` (``None`` when absent), kept so
        templates can apply their own date pattern. Cells without a time of
        day decode to midnight.
    memo:
        Memo text or ``None``.
    original:
        The raw row this record was built from.
    """

    payee: str
    amount: Decimal
    amount_formatted: str
    amount_cjk: str
    date: str = ""
    date_value: dt.datetime | None = None
    memo: str | None = None
    original: RawRecord = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NormalizeResult:
    """Output of a normalization batch.

    ``records`` follow input row order minus dropped rows. ``errors`` hold one
    human-readable entry per dropped row (``"Row N: <reason>"``) in discovery
    order.
    """

    records: tuple[CanonicalRecord, ...]
    errors: tuple[str, ...]


__all__ = [
    "CanonicalRecord",
    "FieldMapping",
    "NormalizeResult",
    "RawRecord",
    "Sheet",
]
