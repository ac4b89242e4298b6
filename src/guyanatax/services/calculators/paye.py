"""PAYE (Pay-As-You-Earn) income tax calculator."""

from __future__ import annotations

from guyanatax.config.rate_tables import Bracket, PayeRates, RateTable
from guyanatax.models import (
    BracketAmount,
    PayeDeductions,
    PayeInput,
    PayeResult,
)

from .utils import (
    ZERO,
    RateTableCalculator,
    allocate_progressive_tax,
    floor_at_zero,
    format_percentage,
    marginal_rate,
    round_currency,
    round_rate,
)


def _bracket_label(bracket: Bracket) -> str:
    if bracket.label:
        return bracket.label
    rate = format_percentage(bracket.rate)
    if bracket.upper is None:
        return f"Over GYD {bracket.lower:,} @ {rate}"
    return f"GYD {bracket.lower:,} - {bracket.upper:,} @ {rate}"


def calculate_deductions(payload: PayeInput, rates: PayeRates) -> PayeDeductions:
    """Return the unrounded allowances and deductions taken off gross income."""

    gross = payload.gross_monthly_income
    personal_allowance = max(rates.personal_allowance, gross * rates.allowance_fraction)
    eligible_children = payload.dependent_children
    if rates.max_allowance_children is not None:
        eligible_children = min(eligible_children, rates.max_allowance_children)
    child_allowance = eligible_children * rates.child_allowance
    insurance_deduction = min(
        payload.insurance_premium_paid,
        gross * rates.insurance_deduction_rate,
        rates.insurance_deduction_cap,
    )
    overtime_exemption = min(payload.overtime_income, rates.overtime_exemption_cap)
    return PayeDeductions(
        personal_allowance=personal_allowance,
        child_allowance=child_allowance,
        insurance_deduction=insurance_deduction,
        overtime_exemption=overtime_exemption,
    )


def calculate_paye(payload: PayeInput, table: RateTable) -> PayeResult:
    """Compute monthly PAYE on ``payload`` using the brackets in ``table``."""

    rates = table.paye
    gross = payload.gross_monthly_income
    deductions = calculate_deductions(payload, rates)
    taxable_income = floor_at_zero(gross - deductions.total)

    portions = allocate_progressive_tax(taxable_income, rates.brackets)
    total_tax = sum((portion.tax for portion in portions), ZERO)
    effective_rate = total_tax / gross if gross > 0 else ZERO

    return PayeResult(
        gross_income=round_currency(gross),
        deductions=PayeDeductions(
            personal_allowance=round_currency(deductions.personal_allowance),
            child_allowance=round_currency(deductions.child_allowance),
            insurance_deduction=round_currency(deductions.insurance_deduction),
            overtime_exemption=round_currency(deductions.overtime_exemption),
        ),
        taxable_income=round_currency(taxable_income),
        bracket_breakdown=tuple(
            BracketAmount(
                label=_bracket_label(portion.bracket),
                lower=portion.bracket.lower,
                upper=portion.bracket.upper,
                rate=portion.bracket.rate,
                taxable_amount=round_currency(portion.amount),
                tax=round_currency(portion.tax),
            )
            for portion in portions
        ),
        total_tax=round_currency(total_tax),
        net_pay=round_currency(gross - total_tax),
        effective_rate=round_rate(effective_rate),
        marginal_rate=marginal_rate(taxable_income, rates.brackets),
        rate_table=table.id,
    )


class PayeCalculator(RateTableCalculator[PayeInput, PayeResult]):
    input_model = PayeInput
    calculation = staticmethod(calculate_paye)


__all__ = ["PayeCalculator", "calculate_deductions", "calculate_paye"]
