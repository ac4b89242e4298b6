"""Unit tests for the PAYE calculator."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from guyanatax.config.schema import RateTable
from guyanatax.models import InputValidationError, PayeInput
from guyanatax.services.calculators import (
    PayeCalculator,
    calculate_deductions,
    calculate_paye,
)

MID_2025 = date(2025, 6, 1)
MID_2024 = date(2024, 6, 1)


def _paye(table: RateTable, **payload: object):
    return calculate_paye(PayeInput.model_validate(payload), table)


def test_income_below_personal_allowance_is_untaxed(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=100_000)

    assert result.taxable_income == Decimal("0")
    assert result.total_tax == Decimal("0")
    assert result.net_pay == Decimal("100000")
    assert result.effective_rate == Decimal("0")
    assert result.marginal_rate == Decimal("0.25")
    assert all(entry.tax == 0 for entry in result.bracket_breakdown)


def test_income_spanning_both_bands(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=300_000)

    assert result.deductions.personal_allowance == Decimal("130000")
    assert result.taxable_income == Decimal("170000")
    assert [entry.taxable_amount for entry in result.bracket_breakdown] == [
        Decimal("130000"),
        Decimal("40000"),
    ]
    assert [entry.tax for entry in result.bracket_breakdown] == [
        Decimal("32500"),
        Decimal("14000"),
    ]
    assert result.total_tax == Decimal("46500")
    assert result.net_pay == Decimal("253500")
    assert result.effective_rate == Decimal("0.1550")
    assert result.marginal_rate == Decimal("0.35")
    assert result.rate_table == "2025"


def test_first_band_upper_bound_is_inclusive(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=260_000)

    assert result.taxable_income == Decimal("130000")
    assert result.total_tax == Decimal("32500")
    assert result.bracket_breakdown[1].taxable_amount == Decimal("0")
    assert result.marginal_rate == Decimal("0.25")


def test_boundary_at_twice_the_first_band(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=390_000)

    assert result.taxable_income == Decimal("260000")
    assert result.total_tax == Decimal("78000")


def test_allowance_fraction_takes_over_for_high_earners(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=600_000)

    assert result.deductions.personal_allowance == Decimal("200000")
    assert result.taxable_income == Decimal("400000")
    assert result.total_tax == Decimal("127000")


def test_child_allowance_reduces_taxable_income(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=300_000, dependent_children=2)

    assert result.deductions.child_allowance == Decimal("20000")
    assert result.taxable_income == Decimal("150000")
    assert result.total_tax == Decimal("39500")


def test_child_allowance_stops_at_the_configured_cap(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=300_000, dependent_children=5)

    assert table_2025.paye.max_allowance_children == 3
    assert result.deductions.child_allowance == Decimal("30000")
    assert result.taxable_income == Decimal("140000")
    assert result.total_tax == Decimal("36000")
    assert result == _paye(table_2025, gross_monthly_income=300_000, dependent_children=3)


def test_uncapped_table_allows_every_child(table_2025: RateTable) -> None:
    uncapped = table_2025.model_copy(
        update={"paye": table_2025.paye.model_copy(update={"max_allowance_children": None})}
    )

    result = _paye(uncapped, gross_monthly_income=300_000, dependent_children=5)

    assert result.deductions.child_allowance == Decimal("50000")


def test_insurance_deduction_limited_to_share_of_gross(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=300_000, insurance_premium_paid=40_000)

    assert result.deductions.insurance_deduction == Decimal("30000")
    assert result.total_tax == Decimal("36000")


def test_insurance_deduction_capped(table_2025: RateTable) -> None:
    deductions = calculate_deductions(
        PayeInput(gross_monthly_income=1_000_000, insurance_premium_paid=80_000),
        table_2025.paye,
    )

    assert deductions.insurance_deduction == Decimal("50000")


def test_overtime_exemption_capped(table_2025: RateTable) -> None:
    result = _paye(table_2025, gross_monthly_income=300_000, overtime_income=60_000)

    assert result.deductions.overtime_exemption == Decimal("50000")
    assert result.taxable_income == Decimal("120000")
    assert result.total_tax == Decimal("30000")


def test_tax_never_decreases_with_income(table_2025: RateTable) -> None:
    previous = Decimal("-1")
    for gross in range(0, 800_001, 25_000):
        tax = _paye(table_2025, gross_monthly_income=gross).total_tax
        assert tax >= previous
        previous = tax


def test_calculator_resolves_table_by_date() -> None:
    calculator = PayeCalculator()

    current = calculator.compute({"gross_monthly_income": 300_000}, MID_2025)
    earlier = calculator.compute({"gross_monthly_income": 300_000}, MID_2024)

    assert current.rate_table == "2025"
    assert earlier.rate_table == "2024"
    assert earlier.total_tax == Decimal("60800")


def test_calculator_accepts_datetime_effective_dates() -> None:
    calculator = PayeCalculator()

    result = calculator.compute({"gross_monthly_income": 300_000}, datetime(2025, 6, 1, 12, 30))
    late_2024 = calculator.compute(
        {"gross_monthly_income": 300_000}, datetime(2024, 12, 31, 23, 59, 59)
    )

    assert result.rate_table == "2025"
    assert late_2024.rate_table == "2024"


def test_overtime_exceeding_gross_is_rejected() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        PayeCalculator().compute(
            {"gross_monthly_income": 100_000, "overtime_income": 150_000},
            MID_2025,
        )

    assert excinfo.value.errors == {
        "overtime_income": "overtime income cannot exceed gross monthly income"
    }


def test_negative_income_is_rejected() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        PayeCalculator().compute({"gross_monthly_income": -5}, MID_2025)

    assert excinfo.value.errors["gross_monthly_income"] == "value cannot be negative"


def test_breakdown_serialises_to_plain_values(table_2025: RateTable) -> None:
    payload = _paye(table_2025, gross_monthly_income=300_000).as_dict()

    assert payload["bracket_breakdown"][0]["tax"] == Decimal("32500")
    assert payload["bracket_breakdown"][1]["upper"] is None
    assert payload["deductions"]["personal_allowance"] == Decimal("130000")
