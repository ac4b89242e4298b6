"""Withholding tax (section 7B) calculator."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from guyanatax.config.rate_tables import RateTable
from guyanatax.models import (
    PayeeWithholding,
    WithholdingBatchSummary,
    WithholdingInput,
    WithholdingPayment,
    WithholdingResult,
    WithholdingReturn,
    coerce_inputs,
)

from .utils import ZERO, RateTableCalculator, due_in_following_month, round_currency, round_rate


def calculate_withholding(payload: WithholdingInput, table: RateTable) -> WithholdingResult:
    """Withhold ``gross x rate`` at source; every category has a configured rate."""

    rate = table.withholding_tax.rates[payload.category]
    withheld = payload.gross_payment * rate

    return WithholdingResult(
        category=payload.category,
        rate=rate,
        gross_payment=round_currency(payload.gross_payment),
        withheld_amount=round_currency(withheld),
        net_payment=round_currency(payload.gross_payment - withheld),
        rate_table=table.id,
    )


def calculate_withholding_batch(
    payloads: Iterable[WithholdingInput | Mapping[str, Any]], table: RateTable
) -> WithholdingBatchSummary:
    """Compute withholding on several payments and total the results.

    ``average_rate`` is the total withheld over the total gross, or zero for an
    empty or all-zero batch.
    """

    items = tuple(
        calculate_withholding(item, table)
        for item in coerce_inputs(WithholdingInput, payloads, "payments")
    )
    gross = sum((item.gross_payment for item in items), ZERO)
    withheld = sum((item.withheld_amount for item in items), ZERO)

    return WithholdingBatchSummary(
        items=items,
        total_gross_payments=gross,
        total_withheld=withheld,
        total_net_payments=sum((item.net_payment for item in items), ZERO),
        average_rate=round_rate(withheld / gross) if gross else ZERO,
        rate_table=table.id,
    )


def calculate_withholding_return(
    payments: Iterable[WithholdingPayment | Mapping[str, Any]],
    period: date,
    table: RateTable,
) -> WithholdingReturn:
    """Build the monthly withholding return for the month containing ``period``.

    Payments dated outside that month are left out. Payees are grouped by TIN
    when one is given and by name otherwise, in order of first appearance.
    """

    entries = [
        entry
        for entry in coerce_inputs(WithholdingPayment, payments, "payments")
        if (entry.payment_date.year, entry.payment_date.month) == (period.year, period.month)
    ]

    results: list[WithholdingResult] = []
    payees: dict[str, PayeeWithholding] = {}

    for entry in entries:
        result = calculate_withholding(
            WithholdingInput(gross_payment=entry.gross_payment, category=entry.category),
            table,
        )
        results.append(result)

        key = entry.payee_tin or entry.payee_name.strip().casefold()
        current = payees.get(key)
        if current is None:
            payees[key] = PayeeWithholding(
                payee_name=entry.payee_name,
                payee_tin=entry.payee_tin,
                total_gross=result.gross_payment,
                total_withheld=result.withheld_amount,
                payment_count=1,
            )
        else:
            payees[key] = PayeeWithholding(
                payee_name=current.payee_name,
                payee_tin=current.payee_tin,
                total_gross=current.total_gross + result.gross_payment,
                total_withheld=current.total_withheld + result.withheld_amount,
                payment_count=current.payment_count + 1,
            )

    return WithholdingReturn(
        year=period.year,
        month=period.month,
        payments=tuple(results),
        total_gross_payments=sum((item.gross_payment for item in results), ZERO),
        total_withheld=sum((item.withheld_amount for item in results), ZERO),
        total_net_payments=sum((item.net_payment for item in results), ZERO),
        payee_breakdown=tuple(payees.values()),
        due_date=due_in_following_month(period, table.withholding_tax.return_due_day),
        rate_table=table.id,
    )


class WithholdingTaxCalculator(RateTableCalculator[WithholdingInput, WithholdingResult]):
    input_model = WithholdingInput
    calculation = staticmethod(calculate_withholding)


__all__ = [
    "WithholdingTaxCalculator",
    "calculate_withholding",
    "calculate_withholding_batch",
    "calculate_withholding_return",
]
