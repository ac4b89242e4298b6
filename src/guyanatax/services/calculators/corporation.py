"""Corporation tax calculator with the turnover-based minimum tax."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from guyanatax.config.rate_tables import RateTable
from guyanatax.models import (
    CorporationTaxInput,
    CorporationTaxResult,
    CorporationTaxRule,
    InstalmentSchedule,
    QuarterlyInstalment,
)

from .utils import ZERO, RateTableCalculator, due_in_following_month, round_currency


def calculate_corporation_tax(
    payload: CorporationTaxInput, table: RateTable
) -> CorporationTaxResult:
    """Compute corporation tax as the greater of the profit rate and the floor.

    Which company categories the minimum tax applies to comes from the rate
    table's ``minimum_tax.applies_to``; ``minimum_tax`` is ``None`` for the
    others.
    """

    config = table.corporation_tax
    category = payload.company_category
    rate = config.rates[category]

    base_tax = payload.taxable_profit * rate
    minimum_tax = None
    if config.minimum_tax.applies(category):
        minimum_tax = payload.annual_turnover * config.minimum_tax.rate

    if minimum_tax is not None and minimum_tax > base_tax:
        payable = minimum_tax
        rule = CorporationTaxRule.MINIMUM
    else:
        payable = base_tax
        rule = CorporationTaxRule.BASE

    return CorporationTaxResult(
        company_category=category,
        rate=rate,
        base_tax=round_currency(base_tax),
        minimum_tax=round_currency(minimum_tax) if minimum_tax is not None else None,
        payable_tax=round_currency(payable),
        rule_applied=rule,
        profit_after_tax=round_currency(payload.taxable_profit - payable),
        rate_table=table.id,
    )


def calculate_quarterly_instalments(
    estimate: CorporationTaxResult,
    tax_year: int,
    table: RateTable,
    previous_year_tax: Decimal = ZERO,
) -> InstalmentSchedule:
    """Split the year's advance corporation tax into four quarterly payments.

    The amount to pay in advance is the larger of the current estimate and the
    previous year's tax scaled by ``instalment_uplift``. Each quarter's payment
    falls due on ``instalment_due_day`` of the month after the quarter ends;
    the last instalment absorbs any rounding so the four add up exactly.
    """

    if previous_year_tax < 0:
        raise ValueError("previous_year_tax cannot be negative")

    config = table.corporation_tax
    prior_basis = round_currency(previous_year_tax * config.instalment_uplift)
    required = max(estimate.payable_tax, prior_basis)

    instalments: list[QuarterlyInstalment] = []
    paid = ZERO
    for quarter in range(1, 5):
        cumulative = required if quarter == 4 else round_currency(required * quarter / 4)
        instalments.append(
            QuarterlyInstalment(
                quarter=quarter,
                due_date=due_in_following_month(
                    date(tax_year, quarter * 3, 1), config.instalment_due_day
                ),
                amount=cumulative - paid,
                cumulative=cumulative,
                balance_remaining=required - cumulative,
            )
        )
        paid = cumulative

    return InstalmentSchedule(
        tax_year=tax_year,
        estimated_tax=estimate.payable_tax,
        prior_year_basis=prior_basis,
        required_total=required,
        instalments=tuple(instalments),
        rate_table=table.id,
    )


class CorporationTaxCalculator(
    RateTableCalculator[CorporationTaxInput, CorporationTaxResult]
):
    input_model = CorporationTaxInput
    calculation = staticmethod(calculate_corporation_tax)


__all__ = [
    "CorporationTaxCalculator",
    "calculate_corporation_tax",
    "calculate_quarterly_instalments",
]
