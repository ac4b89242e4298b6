"""Unit tests for withholding tax."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from guyanatax.config.schema import RateTable
from guyanatax.models import (
    InputValidationError,
    WithholdingCategory,
    WithholdingInput,
    WithholdingPayment,
)
from guyanatax.services.calculators import (
    WithholdingTaxCalculator,
    calculate_withholding,
    calculate_withholding_batch,
    calculate_withholding_return,
)


def test_interest_is_withheld_at_twenty_percent(table_2025: RateTable) -> None:
    result = calculate_withholding(
        WithholdingInput(gross_payment=500_000, category=WithholdingCategory.INTEREST),
        table_2025,
    )

    assert result.rate == Decimal("0.20")
    assert result.withheld_amount == Decimal("100000")
    assert result.net_payment == Decimal("400000")


@pytest.mark.parametrize("category", list(WithholdingCategory))
def test_every_category_has_a_rate(table_2025: RateTable, category: WithholdingCategory) -> None:
    result = calculate_withholding(
        WithholdingInput(gross_payment=1_000, category=category), table_2025
    )

    assert result.withheld_amount + result.net_payment == Decimal("1000")


def test_section_7b_categories_accept_their_codes() -> None:
    result = WithholdingTaxCalculator().compute(
        {"gross_payment": 250_000, "category": "7B2"}, date(2025, 6, 1)
    )

    assert result.category is WithholdingCategory.SECTION_7B2
    assert result.withheld_amount == Decimal("25000")
    assert result.as_dict()["category"] == "7B2"


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        WithholdingTaxCalculator().compute(
            {"gross_payment": 1_000, "category": "salaries"}, date(2025, 6, 1)
        )

    assert "category" in excinfo.value.errors


def test_batch_totals_and_average_rate(table_2025: RateTable) -> None:
    summary = calculate_withholding_batch(
        [
            {"gross_payment": 100_000, "category": "interest"},
            {"gross_payment": 100_000, "category": "7B2"},
            WithholdingInput(gross_payment=200_000, category=WithholdingCategory.SECTION_7B3),
        ],
        table_2025,
    )

    assert len(summary.items) == 3
    assert summary.total_gross_payments == Decimal("400000")
    assert summary.total_withheld == Decimal("58000")
    assert summary.total_net_payments == Decimal("342000")
    assert summary.average_rate == Decimal("0.1450")


def test_empty_batch_has_zero_average_rate(table_2025: RateTable) -> None:
    summary = calculate_withholding_batch([], table_2025)

    assert summary.items == ()
    assert summary.average_rate == Decimal("0")


def test_batch_reports_invalid_payments_by_position(table_2025: RateTable) -> None:
    with pytest.raises(InputValidationError) as excinfo:
        calculate_withholding_batch(
            [{"gross_payment": 1, "category": "interest"}, {"gross_payment": 1}],
            table_2025,
        )

    assert list(excinfo.value.errors) == ["payments.1.category"]


def test_monthly_return_groups_payees_within_the_month(table_2025: RateTable) -> None:
    payments = [
        {
            "payee_name": "Demerara Contractors",
            "payee_tin": "123456789",
            "payment_date": "2025-06-03",
            "gross_payment": 250_000,
            "category": "7B2",
        },
        {
            "payee_name": "Essequibo Bank",
            "payment_date": "2025-06-15",
            "gross_payment": 100_000,
            "category": "interest",
        },
        WithholdingPayment(
            payee_name="Demerara Contractors Inc.",
            payee_tin="123456789",
            payment_date=date(2025, 6, 28),
            gross_payment=Decimal("50000"),
            category=WithholdingCategory.SECTION_7B2,
        ),
        {
            "payee_name": "Essequibo Bank",
            "payment_date": "2025-07-01",
            "gross_payment": 900_000,
            "category": "interest",
        },
    ]

    withholding_return = calculate_withholding_return(payments, date(2025, 6, 30), table_2025)

    assert (withholding_return.year, withholding_return.month) == (2025, 6)
    assert len(withholding_return.payments) == 3
    assert withholding_return.total_gross_payments == Decimal("400000")
    assert withholding_return.total_withheld == Decimal("50000")
    assert withholding_return.total_net_payments == Decimal("350000")
    assert withholding_return.due_date == date(2025, 7, 15)

    contractor, bank = withholding_return.payee_breakdown
    assert contractor.payee_name == "Demerara Contractors"
    assert contractor.total_gross == Decimal("300000")
    assert contractor.total_withheld == Decimal("30000")
    assert contractor.payment_count == 2
    assert bank.payee_tin is None
    assert bank.total_withheld == Decimal("20000")
    assert bank.payment_count == 1


def test_december_return_is_due_in_january(table_2025: RateTable) -> None:
    withholding_return = calculate_withholding_return([], date(2025, 12, 1), table_2025)

    assert withholding_return.payments == ()
    assert withholding_return.payee_breakdown == ()
    assert withholding_return.total_withheld == Decimal("0")
    assert withholding_return.due_date == date(2026, 1, 15)


def test_return_requires_a_payee_name(table_2025: RateTable) -> None:
    with pytest.raises(InputValidationError) as excinfo:
        calculate_withholding_return(
            [
                {
                    "payee_name": "",
                    "payment_date": "2025-06-03",
                    "gross_payment": 1_000,
                    "category": "interest",
                }
            ],
            date(2025, 6, 30),
            table_2025,
        )

    assert list(excinfo.value.errors) == ["payments.0.payee_name"]


def test_return_serialises_nested_records(table_2025: RateTable) -> None:
    withholding_return = calculate_withholding_return(
        [
            {
                "payee_name": "Berbice Holdings",
                "payment_date": "2025-06-10",
                "gross_payment": 10_000,
                "category": "dividends",
            }
        ],
        date(2025, 6, 1),
        table_2025,
    )

    data = withholding_return.as_dict()
    assert data["payments"][0]["category"] == "dividends"
    assert data["payee_breakdown"][0]["total_withheld"] == Decimal("2000")
