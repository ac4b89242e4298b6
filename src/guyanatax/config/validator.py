"""Utilities for validating rate table data and surfacing issues."""

from __future__ import annotations

import argparse
from decimal import Decimal
from typing import Mapping, Sequence

from .rate_tables import (
    ConfigurationError,
    NisRates,
    PayeRates,
    RateTable,
    available_tables,
    load_rate_table,
    load_rate_tables,
)

_CONTRIBUTION_TOLERANCE = Decimal("1")


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_unit_rates(scope: str, rates: Mapping[object, Decimal]) -> list[str]:
    errors: list[str] = []
    for key, value in rates.items():
        label = getattr(key, "value", key)
        if value < 0 or value > 1:
            errors.append(
                _format_scope(scope, f"rate for '{label}' {value} must be between 0 and 1")
            )
    return errors


def _validate_paye(paye: PayeRates) -> list[str]:
    errors: list[str] = []

    rates = [bracket.rate for bracket in paye.brackets]
    if rates != sorted(rates):
        errors.append(
            _format_scope("paye.tax_brackets", "marginal rates should not decrease")
        )

    for index, bracket in enumerate(paye.brackets):
        if not bracket.label.strip():
            errors.append(
                _format_scope("paye.tax_brackets", f"bracket {index} has no label")
            )

    if paye.insurance_deduction_cap == 0 and paye.insurance_deduction_rate > 0:
        errors.append(
            _format_scope(
                "paye",
                "insurance deduction rate is set but the cap is zero",
            )
        )

    return errors


def _validate_nis(nis: NisRates) -> list[str]:
    """Flag maxima that disagree with ``ceiling x rate`` by more than a unit."""

    errors: list[str] = []

    for period, limits in nis.periods.items():
        scope = f"nis.periods.{period.value}"
        for label, rate, maximum in (
            ("employee", nis.employee_rate, limits.max_employee_contribution),
            ("employer", nis.employer_rate, limits.max_employer_contribution),
        ):
            expected = limits.ceiling * rate
            if abs(expected - maximum) > _CONTRIBUTION_TOLERANCE:
                errors.append(
                    _format_scope(
                        scope,
                        (
                            f"maximum {label} contribution {maximum} differs from "
                            f"ceiling x rate ({expected})"
                        ),
                    )
                )

    return errors


def _validate_meta(table: RateTable) -> list[str]:
    errors: list[str] = []
    source = table.meta.get("source")
    if not isinstance(source, str) or not source.strip():
        errors.append(_format_scope("meta", "a 'source' reference should be recorded"))
    return errors


def validate_rate_table(table: RateTable) -> list[str]:
    """Return a list of validation issues for the provided rate table."""

    errors: list[str] = []

    errors.extend(_validate_paye(table.paye))
    errors.extend(_validate_nis(table.nis))
    errors.extend(
        _validate_unit_rates("corporation_tax.rates", table.corporation_tax.rates)
    )
    errors.extend(_validate_unit_rates("property_tax.rates", table.property_tax.rates))
    errors.extend(
        _validate_unit_rates("withholding_tax.rates", table.withholding_tax.rates)
    )
    errors.extend(_validate_meta(table))

    return errors


def validate_all_tables(table_ids: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate configured tables and return issues keyed by table id."""

    targets = table_ids or available_tables()
    results: dict[str, list[str]] = {}

    for table_id in targets:
        table = load_rate_table(str(table_id))
        results[str(table_id)] = validate_rate_table(table)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured rate tables and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "tables",
        nargs="*",
        help="Specific rate table ids to validate (defaults to all configured tables)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    table_ids = args.tables or available_tables()

    if not table_ids:
        parser.print_help()
        return 1

    exit_code = 0

    for table_id in table_ids:
        try:
            table = load_rate_table(table_id)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{table_id}] failed to load rate table: {error}")
            exit_code = 1
            continue

        issues = validate_rate_table(table)
        if issues:
            exit_code = 1
            print(f"[{table_id}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{table_id}] OK")

    if not args.tables:
        try:
            load_rate_tables()
        except ConfigurationError as error:
            print(f"[all] rate tables are inconsistent: {error}")
            exit_code = 1

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
