import logging
from datetime import datetime
from decimal import Decimal

import pytest

from checkprint import FieldMapping, RecordNormalizer, lookup, normalize


def test_alice_row_is_fully_normalized():
    row = {"payee": "Alice", "amount": "$1,234.50", "date": "2024-01-15", "memo": "rent"}

    result = normalize([row])

    assert result.errors == ()
    assert len(result.records) == 1
    rec = result.records[0]
    assert rec.payee == "Alice"
    assert rec.amount == Decimal("1234.5")
    assert "1,234.50" in rec.amount_formatted
    assert rec.amount_cjk.endswith("角")
    assert rec.date == "2024-01-15"
    assert rec.date_value == datetime(2024, 1, 15)
    assert rec.memo == "rent"
    assert rec.original is row


def test_empty_payee_is_reported_as_row_2():
    result = normalize([{"payee": "", "amount": "10"}])
    assert result.records == ()
    assert result.errors == ("Row 2: Missing payee",)


def test_missing_payee_column_and_whitespace_payee():
    result = normalize([{"amount": "10"}, {"payee": "   ", "amount": "10"}])
    assert result.records == ()
    assert result.errors == ("Row 2: Missing payee", "Row 3: Missing payee")


def test_rows_keep_order_and_errors_use_display_row_numbers():
    rows = [
        {"payee": "A", "amount": "1"},
        {"payee": "B", "amount": "abc"},
        {"payee": None, "amount": "3"},
        {"payee": "D", "amount": 4},
        {"payee": "E", "amount": ""},
        {"payee": "F", "amount": "6"},
    ]

    result = normalize(rows)

    assert [r.payee for r in result.records] == ["A", "D", "F"]
    assert result.errors == (
        "Row 3: Invalid amount",
        "Row 4: Missing payee",
        "Row 6: Invalid amount",
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("NT$ 1,234.50 元", Decimal("1234.50")),
        ("-$50.00", Decimal("-50.00")),
        (1234.5, Decimal("1234.5")),
        (1.5e-7, Decimal("1.5e-7")),
        (Decimal("7.25"), Decimal("7.25")),
    ],
)
def test_amount_parsing(raw, expected):
    (rec,) = normalize([{"payee": "P", "amount": raw}]).records
    assert rec.amount == expected


def test_amounts_beyond_decimal_precision_still_normalize():
    result = normalize([{"payee": "A", "amount": "1" + "0" * 30}, {"payee": "B", "amount": 1e30}])

    assert result.errors == ()
    assert [r.amount_formatted for r in result.records] == [f"{10**30:,}.00"] * 2
    assert [r.amount_cjk for r in result.records] == ["", ""]


def test_negative_amount_projections():
    (rec,) = normalize([{"payee": "P", "amount": "-$50.00"}]).records
    assert rec.amount_formatted == "-50.00"
    assert rec.amount_cjk == "負伍拾元整"


def test_lookup_exact_first_then_case_insensitive():
    assert lookup({"payee": "exact", "PAYEE": "other"}, "payee") == "exact"
    assert lookup({"Payee": "folded"}, "payee") == "folded"
    assert lookup({"payee": None, "PAYEE": "fallback"}, "payee") == "fallback"
    assert lookup({"other": 1}, "payee") is None


def test_case_insensitive_headers_in_rows():
    (rec,) = normalize([{"Payee": "Bob", "AMOUNT": 5, "Memo": "x"}]).records
    assert rec.payee == "Bob"
    assert rec.amount_formatted == "5.00"
    assert rec.memo == "x"


@pytest.mark.parametrize("garbage", [{}, [], "   ", "not a date", None, True, 60])
def test_unusable_dates_are_absent_not_errors(garbage):
    result = normalize([{"payee": "P", "amount": "1", "date": garbage}])
    assert result.errors == ()
    (rec,) = result.records
    assert rec.date == ""
    assert rec.date_value is None


def test_serial_dates_and_custom_pattern():
    normalizer = RecordNormalizer(date_format="YYYY/MM/DD")
    (rec,) = normalizer.normalize([{"payee": "P", "amount": "1", "date": 45306}]).records
    assert rec.date == "2024/01/15"


def test_date_pattern_with_time_tokens_keeps_the_time():
    normalizer = RecordNormalizer(date_format="YYYY-MM-DD HH:mm")
    rows = [
        {"payee": "P", "amount": "1", "date": "2024-01-15T10:30"},
        {"payee": "Q", "amount": "1", "date": 45306.75},
        {"payee": "R", "amount": "1", "date": "2024-01-15"},
    ]

    records = normalizer.normalize(rows).records

    assert [r.date for r in records] == ["2024-01-15 10:30", "2024-01-15 18:00", "2024-01-15 00:00"]
    assert records[0].date_value == datetime(2024, 1, 15, 10, 30)


def test_1904_workbooks_shift_serials():
    (rec,) = normalize([{"payee": "P", "amount": "1", "date": 0}], date_1904=True).records
    assert rec.date == "1904-01-01"


def test_mapping_overrides_and_disabled_roles():
    rows = [{"Payee Name": "Carol", "Total": "99", "memo": "ignored", "date": "2024-01-15"}]

    result = normalize(rows, {"payee": "Payee Name", "amount": "Total", "memo": None})

    (rec,) = result.records
    assert rec.payee == "Carol"
    assert rec.amount == Decimal("99")
    assert rec.memo is None
    assert rec.date == "2024-01-15"


def test_mapping_rejects_unknown_and_empty_required_roles():
    with pytest.raises(ValueError, match="Unknown mapping role"):
        FieldMapping().with_overrides({"payer": "x"})
    with pytest.raises(ValueError, match="required"):
        RecordNormalizer(mapping={"amount": ""})


def test_numeric_payee_and_memo_use_natural_text():
    (rec,) = normalize([{"payee": 12345.0, "amount": "1", "memo": 7.5}]).records
    assert rec.payee == "12345"
    assert rec.memo == "7.5"


def test_format_for_template_uses_workbook_epoch():
    normalizer = RecordNormalizer(date_1904=True)
    assert normalizer.format_for_template(0, "YYYY-MM-DD") == "1904-01-01"
    assert normalizer.format_for_template("12", "currency") == "12.00"


def test_normalize_is_deterministic():
    rows = [{"payee": "A", "amount": "1"}, {"payee": "", "amount": "2"}]
    assert normalize(rows) == normalize(rows)


def test_batch_summary_logged(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger="checkprint")

    normalize([{"payee": "A", "amount": "1"}, {"payee": "", "amount": "2"}])

    messages = [r.getMessage() for r in caplog.records if r.name == "checkprint.normalizers"]
    assert "normalize:drop row=3 reason=Missing payee" in messages
    assert "normalize:done records=1 errors=1" in messages
