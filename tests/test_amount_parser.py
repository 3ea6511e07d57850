"""Tests for amount parsing and formatting."""

import pytest
from decimal import Decimal

from kkb.utils.amount_parser import format_amount, parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1500", Decimal("1500")),
        ("1,234.56", Decimal("1234.56")),
        ("¥1,500", Decimal("1500")),
        ("￥2,000", Decimal("2000")),
        ("$123.45", Decimal("123.45")),
        ("  42  ", Decimal("42")),
        ("0", Decimal("0")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "12..5", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize("text", ["-100", "(100)", "-$5"])
def test_parse_amount_rejects_negative(text):
    with pytest.raises(ValueError, match="must not be negative"):
        parse_amount(text)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("1500"), "1,500"),
        (Decimal("1234567"), "1,234,567"),
        (Decimal("1234.5"), "1,234.50"),
        (Decimal("0"), "0"),
        (Decimal("-80000"), "-80,000"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected
