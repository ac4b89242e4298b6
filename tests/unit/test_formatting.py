"""Unit tests for currency and percentage display helpers."""

from __future__ import annotations

from decimal import Decimal

from guyanatax.services.formatting import format_gyd, format_percentage


def test_format_gyd_groups_thousands() -> None:
    assert format_gyd(Decimal("1234.5")) == "GYD 1,234.50"
    assert format_gyd(1_234_567.891) == "GYD 1,234,567.89"
    assert format_gyd(0) == "GYD 0.00"


def test_format_gyd_rounds_half_up() -> None:
    assert format_gyd("0.005") == "GYD 0.01"
    assert format_gyd(Decimal("2.675")) == "GYD 2.68"


def test_format_gyd_negative_and_without_symbol() -> None:
    assert format_gyd(Decimal("-50")) == "-GYD 50.00"
    assert format_gyd(Decimal("1234.5"), include_symbol=False) == "1,234.50"


def test_format_percentage() -> None:
    assert format_percentage(Decimal("0.14")) == "14%"
    assert format_percentage(Decimal("0.0075")) == "0.75%"
