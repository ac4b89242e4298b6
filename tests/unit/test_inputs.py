"""Unit tests for calculator input validation."""

from __future__ import annotations

from decimal import Decimal

import pytest

from guyanatax.models import (
    CorporationTaxInput,
    MAX_AMOUNT,
    InputValidationError,
    NisInput,
    PayeInput,
    VatInput,
    coerce_input,
    validate_input,
)


def test_amounts_accept_strings_with_separators_and_floats() -> None:
    result = validate_input(PayeInput, {"gross_monthly_income": "1,250,000.50"})

    assert result.valid
    assert result.value.gross_monthly_income == Decimal("1250000.50")
    assert coerce_input(VatInput, {"amount": 0.1}).amount == Decimal("0.1")


def test_validation_reports_each_failing_field() -> None:
    result = validate_input(
        PayeInput,
        {"gross_monthly_income": -1, "dependent_children": 25, "bonus": 10},
    )

    assert not result.valid
    assert result.value is None
    assert result.errors["gross_monthly_income"] == "value cannot be negative"
    assert "dependent_children" in result.errors
    assert "bonus" in result.errors


def test_non_mapping_input_is_rejected() -> None:
    result = validate_input(PayeInput, [300_000])  # type: ignore[arg-type]

    assert result.errors == {"__root__": "input must be a mapping"}
    with pytest.raises(InputValidationError):
        coerce_input(PayeInput, "300000")  # type: ignore[arg-type]


def test_unknown_category_is_a_field_error() -> None:
    with pytest.raises(InputValidationError) as excinfo:
        coerce_input(
            CorporationTaxInput,
            {"taxable_profit": 1, "company_category": "mining"},
        )

    assert str(excinfo.value).startswith("Invalid calculation input: company_category")
    assert list(excinfo.value.errors) == ["company_category"]


def test_models_pass_through_unchanged() -> None:
    payload = PayeInput(gross_monthly_income=100)

    assert coerce_input(PayeInput, payload) is payload
    assert validate_input(PayeInput, payload).value is payload


def test_amounts_are_bounded_to_whole_cents() -> None:
    assert validate_input(VatInput, {"amount": MAX_AMOUNT}).valid

    too_large = validate_input(PayeInput, {"gross_monthly_income": "1e30"})
    too_precise = validate_input(NisInput, {"insurable_earnings": "100.001"})

    assert not too_large.valid
    assert list(too_large.errors) == ["gross_monthly_income"]
    assert too_precise.errors == {
        "insurable_earnings": "amounts cannot have more than 2 decimal places"
    }
