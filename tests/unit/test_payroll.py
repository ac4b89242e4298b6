"""Unit tests for payroll runs."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from guyanatax.models import InputValidationError
from guyanatax.services.payroll import PayrollEmployee, run_payroll
from guyanatax.version import get_project_version

PAY_DATE = date(2025, 6, 30)

STAFF = [
    {"employee_id": "E-001", "gross_pay": 300_000},
    {"employee_id": "E-002", "gross_pay": "100,000"},
]


def test_employee_figures_combine_paye_and_nis() -> None:
    summary = run_payroll(STAFF, PAY_DATE)

    first, second = summary.employees
    assert first.employee_id == "E-001"
    assert first.paye.total_tax == Decimal("46500")
    assert first.nis.employee_contribution == Decimal("15680")
    assert first.total_deductions == Decimal("62180")
    assert first.net_pay == Decimal("237820")
    assert first.employer_cost == Decimal("323520")

    assert second.paye.total_tax == Decimal("0")
    assert second.net_pay == Decimal("94400")
    assert second.employer_cost == Decimal("108400")


def test_totals_sum_rounded_employee_figures() -> None:
    totals = run_payroll(STAFF, PAY_DATE).totals

    assert totals.employee_count == 2
    assert totals.total_gross_pay == Decimal("400000")
    assert totals.total_paye == Decimal("46500")
    assert totals.total_employee_nis == Decimal("21280")
    assert totals.total_employer_nis == Decimal("31920")
    assert totals.total_net_pay == Decimal("332220")
    assert totals.total_employer_cost == Decimal("431920")


def test_parallel_run_matches_sequential_run() -> None:
    staff = [
        {"employee_id": f"E-{index:03d}", "gross_pay": 50_000 * index, "dependent_children": index % 3}
        for index in range(1, 21)
    ]

    sequential = run_payroll(staff, PAY_DATE)
    parallel = run_payroll(staff, PAY_DATE, max_workers=4)

    assert [item.employee_id for item in parallel.employees] == [
        item.employee_id for item in sequential.employees
    ]
    assert parallel.totals == sequential.totals


def test_run_metadata_and_due_date() -> None:
    summary = run_payroll(
        [PayrollEmployee(employee_id="E-001", gross_pay=Decimal("200000"))],
        PAY_DATE,
        contribution_period=date(2025, 6, 1),
    )

    assert summary.rate_table == "2025"
    assert summary.engine_version == get_project_version()
    assert summary.employees[0].nis.due_date == date(2025, 7, 15)
    assert summary.timings == {}


def test_empty_run_has_zero_totals() -> None:
    summary = run_payroll([], PAY_DATE)

    assert summary.employees == ()
    assert summary.totals.employee_count == 0
    assert summary.totals.total_net_pay == Decimal("0")


def test_invalid_entries_are_reported_by_position() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        run_payroll(
            [
                {"employee_id": "E-001", "gross_pay": 100_000},
                {"employee_id": "E-002", "gross_pay": -1},
                {"employee_id": "E-003", "gross_pay": 10, "overtime": 20},
            ],
            PAY_DATE,
        )

    assert excinfo.value.errors == {
        "employees.1.gross_pay": "value cannot be negative",
        "employees.2.overtime": "overtime cannot exceed gross pay",
    }


def test_non_mapping_entries_are_reported_by_position() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        run_payroll([{"employee_id": "E-001", "gross_pay": 100_000}, 250_000], PAY_DATE)

    assert excinfo.value.errors == {"employees.1": "input must be a mapping"}


def test_profiling_records_timings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GUYANATAX_PROFILE_CALCULATIONS", "1")

    summary = run_payroll(STAFF, PAY_DATE)

    assert {"validate", "calculate", "total"} <= set(summary.timings)
