from datetime import date, datetime
from decimal import Decimal

import pytest

from checkprint.formatting import (
    ZERO_AMOUNT_TEXT,
    coerce_number,
    format_currency,
    format_date,
    format_value,
    to_cjk_upper,
)

# ---- CJK legal numerals --------------------------------------------------------


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1234.5, "壹仟貳佰參拾肆元伍角"),
        (1234, "壹仟貳佰參拾肆元整"),
        (101, "壹佰零壹元整"),
        (1010, "壹仟零壹拾元整"),
        (20.05, "貳拾元伍分"),
        (10000, "壹萬元整"),
        (1_000_000, "壹佰萬元整"),
        (100_000_000, "壹億元整"),
        (100_000_001, "壹億零壹元整"),
        ("3.21", "參元貳角壹分"),
    ],
)
def test_to_cjk_upper_values(amount, expected):
    assert to_cjk_upper(amount) == expected


def test_to_cjk_upper_zero_literal_for_zero_and_negative_zero():
    assert ZERO_AMOUNT_TEXT == "零元整"
    assert to_cjk_upper(0) == "零元整"
    assert to_cjk_upper(-0.0) == "零元整"
    assert to_cjk_upper(Decimal("-0.00")) == "零元整"


def test_to_cjk_upper_fraction_only_has_no_leading_yuan():
    assert to_cjk_upper(0.05) == "伍分"
    assert to_cjk_upper(0.5) == "伍角"
    assert to_cjk_upper(0.55) == "伍角伍分"


@pytest.mark.parametrize("amount", [1, 12.3, 1234.56, 100_000_001, 0.07])
def test_to_cjk_upper_negative_is_prefixed(amount):
    assert to_cjk_upper(-amount) == "負" + to_cjk_upper(amount)


@pytest.mark.parametrize(
    "amount, exact",
    [(12, True), (12.004, True), (12.005, False), (12.1, False), (0.999, True)],
)
def test_to_cjk_upper_exact_marker_when_cents_round_to_zero_or_carry(amount, exact):
    assert to_cjk_upper(amount).endswith("整") is exact


def test_to_cjk_upper_cents_carry_into_next_yuan():
    assert to_cjk_upper("0.995") == "壹元整"
    assert to_cjk_upper("9.999") == "壹拾元整"


def test_to_cjk_upper_sign_adjusted_zero():
    assert to_cjk_upper("-0.001") == "負零元整"


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf"), "abc", None, [], ""])
def test_to_cjk_upper_non_numeric_is_empty(bad):
    assert to_cjk_upper(bad) == ""


def test_to_cjk_upper_beyond_largest_unit_is_empty():
    assert to_cjk_upper(10**24) == ""
    assert to_cjk_upper(10**24 - 1) != ""
    assert to_cjk_upper(10**30) == ""
    assert to_cjk_upper("9" * 24 + ".999") == ""


# ---- Currency ------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        (1234.5, "1,234.50"),
        ("1234.5", "1,234.50"),
        (0, "0.00"),
        (2.675, "2.68"),
        (-1234.565, "-1,234.57"),
        (1_000_000, "1,000,000.00"),
        (Decimal("0.005"), "0.01"),
    ],
)
def test_format_currency(value, expected):
    assert format_currency(value) == expected


@pytest.mark.parametrize("bad", ["abc", "", "   ", None, float("nan"), "1,234"])
def test_format_currency_non_numeric_is_empty(bad):
    assert format_currency(bad) == ""


def test_format_currency_keeps_every_digit_of_huge_amounts():
    assert format_currency("1" + "0" * 30) == f"{10**30:,}.00"
    assert format_currency(Decimal("9" * 40 + ".995")) == f"{10**41:,}.00"
    assert format_value(1e30, "currency") == f"{10**30:,}.00"


def test_coerce_number_keeps_shortest_float_form():
    assert coerce_number(0.29) == Decimal("0.29")
    assert coerce_number(True) == Decimal(1)
    assert coerce_number(" 12.5 ") == Decimal("12.5")
    assert coerce_number("Infinity") is None


# ---- Dates ---------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, pattern, expected",
    [
        ("2024-01-15", "YYYY/MM/DD", "2024/01/15"),
        ("2024-01-15", "M/D/YY", "1/15/24"),
        ("2024-01-15", "YYYY 年 MM 月 DD 日", "2024 年 01 月 15 日"),
        ("2024-01-15", "[Date:] YYYY", "Date: 2024"),
        (45306, "YYYY-MM-DD", "2024-01-15"),
        ("45306", "YYYY-MM-DD", "2024-01-15"),
        (date(2024, 3, 9), "DD.MM.YYYY", "09.03.2024"),
    ],
)
def test_format_date_patterns(value, pattern, expected):
    assert format_value(value, pattern) == expected


def test_format_date_unparseable_returns_original_text():
    assert format_value("not a date", "YYYY-MM-DD") == "not a date"
    assert format_value(60, "YYYY-MM-DD") == "60"


@pytest.mark.parametrize(
    "value, pattern, expected",
    [
        ("2024-01-15T10:30:00", "YYYY-MM-DD HH:mm", "2024-01-15 10:30"),
        ("2024-01-15T10:30:00Z", "HH:mm", "10:30"),
        (45306.4375, "YYYY-MM-DD HH:mm:ss", "2024-01-15 10:30:00"),
        ("45306.75", "YYYY-MM-DD H:mm", "2024-01-15 18:00"),
        (datetime(2024, 1, 15, 8, 5, 9), "YYYY H:mm:ss", "2024 8:05:09"),
        (date(2024, 1, 15), "YYYY-MM-DD HH:mm", "2024-01-15 00:00"),
        ("2024-01-15", "YYYY-MM-DD [at] HH:mm", "2024-01-15 at 00:00"),
    ],
)
def test_format_date_time_tokens(value, pattern, expected):
    assert format_value(value, pattern) == expected


def test_format_date_1904_epoch():
    assert format_date(0, "YYYY-MM-DD", date_1904=True) == "1904-01-01"
    assert format_date("", "YYYY-MM-DD") == ""


# ---- Dispatch ------------------------------------------------------------------


def test_format_value_none_is_empty_for_every_format():
    for fmt in (None, "", "currency", "cjk_upper", "YYYY", "whatever"):
        assert format_value(None, fmt) == ""


def test_format_value_natural_text():
    assert format_value(1234.5) == "1234.5"
    assert format_value(3.0) == "3"
    assert format_value("x") == "x"
    assert format_value(1234, "unknown-format") == "1234"


def test_format_value_dispatches_to_currency_and_cjk():
    assert format_value("1234.5", "currency") == "1,234.50"
    assert format_value("abc", "currency") == ""
    assert format_value(1234.5, "cjk_upper") == "壹仟貳佰參拾肆元伍角"
