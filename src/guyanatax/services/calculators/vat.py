"""Value-added tax calculator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal
from typing import Any

from guyanatax.config.rate_tables import RateTable, VatRates
from guyanatax.models import (
    AmountBasis,
    VatCategory,
    VatInput,
    VatItemsSummary,
    VatResult,
    VatReturn,
    coerce_inputs,
)

from .utils import ZERO, RateTableCalculator, due_in_following_month, round_currency


def applicable_rate(category: VatCategory, rates: VatRates) -> Decimal:
    """Zero-rated and exempt supplies carry no output VAT."""

    if category is VatCategory.STANDARD:
        return rates.standard_rate
    return ZERO


def calculate_vat(payload: VatInput, table: RateTable) -> VatResult:
    """Add VAT to an exclusive amount or extract it from an inclusive one."""

    rate = applicable_rate(payload.category, table.vat)
    amount = payload.amount

    # Two of the three figures are rounded and the third derived from them, so
    # net + vat == gross holds exactly on the rounded result.
    if payload.amount_basis is AmountBasis.INCLUSIVE:
        gross = round_currency(amount)
        net = round_currency(amount / (1 + rate))
        vat = gross - net
    else:
        net = round_currency(amount)
        vat = round_currency(amount * rate)
        gross = net + vat

    return VatResult(
        category=payload.category,
        amount_basis=payload.amount_basis,
        rate=rate,
        net_amount=net,
        vat_amount=vat,
        gross_amount=gross,
        rate_table=table.id,
    )


def calculate_vat_items(
    payloads: Iterable[VatInput | Mapping[str, Any]], table: RateTable
) -> VatItemsSummary:
    """Compute VAT for each line of an invoice and total them.

    Every line is validated before any is computed; failures are keyed
    ``items.<index>.<field>``. Treatment totals are on the net amount.
    """

    items = tuple(
        calculate_vat(item, table) for item in coerce_inputs(VatInput, payloads, "items")
    )

    by_category = {category: ZERO for category in VatCategory}
    for item in items:
        by_category[item.category] += item.net_amount

    return VatItemsSummary(
        items=items,
        net_total=sum((item.net_amount for item in items), ZERO),
        vat_total=sum((item.vat_amount for item in items), ZERO),
        gross_total=sum((item.gross_amount for item in items), ZERO),
        standard_rated_amount=by_category[VatCategory.STANDARD],
        zero_rated_amount=by_category[VatCategory.ZERO_RATED],
        exempt_amount=by_category[VatCategory.EXEMPT],
        rate_table=table.id,
    )


def calculate_vat_return(
    sales: Iterable[VatResult],
    purchases: Iterable[VatResult],
    period_start: date,
    period_end: date,
    table: RateTable,
    previous_balance: Decimal = ZERO,
) -> VatReturn:
    """Net output VAT on ``sales`` against input VAT on ``purchases``.

    ``previous_balance`` is carried in as-is: positive for VAT still owed from
    an earlier return, negative for a credit brought forward. The return is
    due on the configured day of the month after ``period_end``.
    """

    if period_end < period_start:
        raise ValueError("period_end cannot be before period_start")

    sales = tuple(sales)
    purchases = tuple(purchases)

    output_vat = sum((item.vat_amount for item in sales), ZERO)
    input_vat = sum((item.vat_amount for item in purchases), ZERO)
    previous = round_currency(previous_balance)
    net_vat = output_vat - input_vat + previous

    return VatReturn(
        period_start=period_start,
        period_end=period_end,
        turnover=sum((item.net_amount for item in sales), ZERO),
        purchases=sum((item.net_amount for item in purchases), ZERO),
        output_vat=output_vat,
        input_vat=input_vat,
        previous_balance=previous,
        net_vat=net_vat,
        refund_due=net_vat < 0,
        due_date=due_in_following_month(period_end, table.vat.return_due_day),
        sales_count=len(sales),
        purchase_count=len(purchases),
        rate_table=table.id,
    )


def requires_vat_registration(annual_turnover: Decimal, table: RateTable) -> bool:
    """Return ``True`` when turnover reaches the VAT registration threshold."""

    return annual_turnover >= table.vat.registration_threshold


class VatCalculator(RateTableCalculator[VatInput, VatResult]):
    input_model = VatInput
    calculation = staticmethod(calculate_vat)


__all__ = [
    "VatCalculator",
    "applicable_rate",
    "calculate_vat",
    "calculate_vat_items",
    "calculate_vat_return",
    "requires_vat_registration",
]
