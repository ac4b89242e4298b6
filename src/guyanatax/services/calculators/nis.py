"""National Insurance Scheme contribution calculator."""

from __future__ import annotations

from dataclasses import replace

from guyanatax.config.rate_tables import RateTable
from guyanatax.models import NisInput, NisResult

from .utils import ZERO, RateTableCalculator, due_in_following_month, round_currency


def calculate_nis(payload: NisInput, table: RateTable) -> NisResult:
    """Compute employee and employer NIS on earnings clamped to the ceiling.

    Each contribution is also capped at the period maximum, so a ceiling that
    does not divide evenly by the rate never yields more than the published
    amount.
    """

    rates = table.nis
    limits = rates.for_period(payload.period_type)

    base = min(payload.insurable_earnings, limits.ceiling)
    employee = min(base * rates.employee_rate, limits.max_employee_contribution)
    employer = min(base * rates.employer_rate, limits.max_employer_contribution)

    due_date = None
    if payload.contribution_period is not None:
        due_date = due_in_following_month(payload.contribution_period, rates.due_day)

    return NisResult(
        period_type=payload.period_type,
        insurable_earnings=round_currency(payload.insurable_earnings),
        contribution_base=round_currency(base),
        employee_contribution=round_currency(employee),
        employer_contribution=round_currency(employer),
        total_contribution=round_currency(employee + employer),
        rate_table=table.id,
        due_date=due_date,
    )


def calculate_self_employed_nis(payload: NisInput, table: RateTable) -> NisResult:
    """Self-employed persons pay both portions themselves.

    The whole contribution is reported as the person's own, with nothing
    attributed to an employer.
    """

    result = calculate_nis(payload, table)
    return replace(
        result,
        employee_contribution=result.total_contribution,
        employer_contribution=ZERO,
    )


class NisCalculator(RateTableCalculator[NisInput, NisResult]):
    input_model = NisInput
    calculation = staticmethod(calculate_nis)


class SelfEmployedNisCalculator(RateTableCalculator[NisInput, NisResult]):
    input_model = NisInput
    calculation = staticmethod(calculate_self_employed_nis)


__all__ = [
    "NisCalculator",
    "SelfEmployedNisCalculator",
    "calculate_nis",
    "calculate_self_employed_nis",
]
