"""Monthly payroll runs combining PAYE and NIS per employee.

A run resolves one rate table for the pay date, computes each employee's PAYE
and NIS independently (optionally on a thread pool, since the calculators share
nothing but the read-only rate table) and aggregates the rounded per-employee
figures into run totals.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from decimal import Decimal
from time import perf_counter
from typing import Any

from pydantic import Field, ValidationInfo, field_validator

from guyanatax.config.rate_tables import RateTable, RateTableSet, load_rate_tables
from guyanatax.models import (
    CalculationInput,
    EmployeeTaxSummary,
    NisInput,
    PayeInput,
    PayrollRunSummary,
    PayrollTotals,
    PeriodType,
    coerce_inputs,
)
from guyanatax.models.inputs import Money
from guyanatax.version import get_project_version

from .calculators import calculate_nis, calculate_paye

_LOGGER = logging.getLogger(__name__)


def _profiling_enabled() -> bool:
    """Return ``True`` when payroll profiling should be captured."""

    flag = os.getenv("GUYANATAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


class PayrollEmployee(CalculationInput):
    """One employee's monthly pay as entered for a payroll run."""

    employee_id: str = Field(min_length=1)
    gross_pay: Money
    overtime: Money = Decimal("0")
    dependent_children: int = Field(default=0, ge=0, le=20)
    insurance_premium_paid: Money = Decimal("0")

    @field_validator("overtime")
    @classmethod
    def _overtime_within_gross(cls, value: Decimal, info: ValidationInfo) -> Decimal:
        gross = info.data.get("gross_pay")
        if gross is not None and value > gross:
            raise ValueError("overtime cannot exceed gross pay")
        return value


def calculate_employee_taxes(
    employee: PayrollEmployee,
    table: RateTable,
    contribution_period: date | None = None,
) -> EmployeeTaxSummary:
    """Compute PAYE and NIS for ``employee`` and derive take-home pay."""

    paye_input = PayeInput(
        gross_monthly_income=employee.gross_pay,
        dependent_children=employee.dependent_children,
        insurance_premium_paid=employee.insurance_premium_paid,
        overtime_income=employee.overtime,
    )

    paye = calculate_paye(paye_input, table)
    nis = calculate_nis(
        NisInput(
            insurable_earnings=employee.gross_pay,
            period_type=PeriodType.MONTHLY,
            contribution_period=contribution_period,
        ),
        table,
    )

    total_deductions = paye.total_tax + nis.employee_contribution
    return EmployeeTaxSummary(
        employee_id=employee.employee_id,
        gross_pay=paye.gross_income,
        paye=paye,
        nis=nis,
        total_deductions=total_deductions,
        net_pay=paye.gross_income - total_deductions,
        employer_cost=paye.gross_income + nis.employer_contribution,
    )


def _aggregate(summaries: Iterable[EmployeeTaxSummary]) -> PayrollTotals:
    totals = PayrollTotals()
    for summary in summaries:
        totals = replace(
            totals,
            employee_count=totals.employee_count + 1,
            total_gross_pay=totals.total_gross_pay + summary.gross_pay,
            total_paye=totals.total_paye + summary.paye.total_tax,
            total_employee_nis=totals.total_employee_nis + summary.nis.employee_contribution,
            total_employer_nis=totals.total_employer_nis + summary.nis.employer_contribution,
            total_net_pay=totals.total_net_pay + summary.net_pay,
            total_employer_cost=totals.total_employer_cost + summary.employer_cost,
        )
    return totals


def run_payroll(
    employees: Iterable[PayrollEmployee | Mapping[str, Any]],
    effective_date: date | None = None,
    *,
    contribution_period: date | None = None,
    rate_tables: RateTableSet | None = None,
    max_workers: int | None = None,
) -> PayrollRunSummary:
    """Compute a monthly payroll run for ``employees``.

    ``effective_date`` selects the rate table (default: today) and
    ``contribution_period`` is the month the wages belong to, used only for the
    NIS due date. Output order matches input order.
    """

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("validate", timings):
        staff = coerce_inputs(PayrollEmployee, employees, "employees")

    tables = rate_tables if rate_tables is not None else load_rate_tables()
    table = tables.resolve(effective_date or date.today())

    def _compute(employee: PayrollEmployee) -> EmployeeTaxSummary:
        return calculate_employee_taxes(employee, table, contribution_period)

    with _profile_section("calculate", timings):
        if max_workers is not None and max_workers > 1 and len(staff) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                summaries = tuple(executor.map(_compute, staff))
        else:
            summaries = tuple(_compute(employee) for employee in staff)

    totals = _aggregate(summaries)

    _LOGGER.debug(
        "Payroll run for %d employee(s) using rate table %s",
        totals.employee_count,
        table.id,
    )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "run_payroll timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return PayrollRunSummary(
        employees=summaries,
        totals=totals,
        rate_table=table.id,
        engine_version=get_project_version(),
        timings=dict(timings or {}),
    )


__all__ = ["PayrollEmployee", "calculate_employee_taxes", "run_payroll"]
