"""Pydantic models describing calculator inputs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from .enums import (
    AmountBasis,
    CompanyCategory,
    ExciseProduct,
    PeriodType,
    PropertyType,
    VatCategory,
    WithholdingCategory,
)

__all__ = [
    "CalculationInput",
    "CapitalGainsInput",
    "CorporationTaxInput",
    "ExciseInput",
    "InputValidationError",
    "InputValidationResult",
    "MAX_AMOUNT",
    "Money",
    "NisInput",
    "PayeInput",
    "PropertyTaxInput",
    "VatInput",
    "WithholdingInput",
    "WithholdingPayment",
    "coerce_input",
    "coerce_inputs",
    "field_errors",
    "format_validation_error",
    "validate_input",
]


def _coerce_amount(value: Any) -> Any:
    # Floats go through ``str`` so 0.1 stays 0.1 rather than its binary expansion.
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        return value.strip().replace(",", "")
    return value


# Whole cents only; the ceiling keeps every amount and product inside the
# default 28-digit decimal context.
MAX_AMOUNT = Decimal("999999999999999.99")

Money = Annotated[
    Decimal,
    BeforeValidator(_coerce_amount),
    Field(ge=0, le=MAX_AMOUNT, decimal_places=2),
]

_ZERO = Decimal("0")


class CalculationInput(BaseModel):
    """Base class for calculator inputs: immutable, no unknown fields."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class PayeInput(CalculationInput):
    """Monthly employment income for PAYE.

    ``gross_monthly_income`` includes any overtime; ``overtime_income`` only
    identifies the part eligible for the overtime exemption.
    """

    gross_monthly_income: Money
    dependent_children: int = Field(default=0, ge=0, le=20)
    insurance_premium_paid: Money = _ZERO
    overtime_income: Money = _ZERO

    @field_validator("overtime_income")
    @classmethod
    def _overtime_within_gross(cls, value: Decimal, info: ValidationInfo) -> Decimal:
        gross = info.data.get("gross_monthly_income")
        if gross is not None and value > gross:
            raise ValueError("overtime income cannot exceed gross monthly income")
        return value


class NisInput(CalculationInput):
    insurable_earnings: Money
    period_type: PeriodType = PeriodType.MONTHLY
    contribution_period: date | None = None


class VatInput(CalculationInput):
    amount: Money
    category: VatCategory = VatCategory.STANDARD
    amount_basis: AmountBasis = AmountBasis.EXCLUSIVE


class CorporationTaxInput(CalculationInput):
    taxable_profit: Money
    annual_turnover: Money = _ZERO
    company_category: CompanyCategory = CompanyCategory.NON_COMMERCIAL


class WithholdingInput(CalculationInput):
    gross_payment: Money
    category: WithholdingCategory


class PropertyTaxInput(CalculationInput):
    property_value: Money
    liabilities: Money = _ZERO
    property_type: PropertyType = PropertyType.RESIDENTIAL


class CapitalGainsInput(CalculationInput):
    sale_price: Money
    cost_basis: Money = _ZERO
    improvements: Money = _ZERO


class ExciseInput(CalculationInput):
    amount: Money
    product: ExciseProduct


class WithholdingPayment(CalculationInput):
    """A dated payment to a named payee, as listed on a withholding return."""

    payee_name: str = Field(min_length=1)
    payee_tin: str | None = None
    payment_date: date
    gross_payment: Money
    category: WithholdingCategory


def _issue_message(issue: Mapping[str, Any]) -> str:
    message = str(issue.get("msg", "Invalid value"))
    if "greater than or equal to 0" in message.lower():
        return "value cannot be negative"
    if issue.get("type") == "less_than_equal" and issue.get("ctx", {}).get("le") == MAX_AMOUNT:
        return f"value cannot exceed {MAX_AMOUNT:,}"
    if issue.get("type") == "decimal_max_places":
        return "amounts cannot have more than 2 decimal places"
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    return message


def field_errors(error: ValidationError) -> dict[str, str]:
    """Map each failing field to a display message (first issue wins)."""

    errors: dict[str, str] = {}
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ())) or "__root__"
        errors.setdefault(location, _issue_message(issue))
    return errors


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages = [
        message if location == "__root__" else f"{location}: {message}"
        for location, message in field_errors(error).items()
    ]
    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation input: {details}"


class InputValidationError(ValueError):
    """Raised when a calculator receives input that fails validation."""

    def __init__(self, message: str, errors: Mapping[str, str]) -> None:
        super().__init__(message)
        self.errors = dict(errors)


InputT = TypeVar("InputT", bound=CalculationInput)


@dataclass(frozen=True)
class InputValidationResult(Generic[InputT]):
    """Outcome of validating raw calculator input without raising."""

    valid: bool
    value: InputT | None = None
    errors: Mapping[str, str] = field(default_factory=dict)


def validate_input(
    model: type[InputT], data: Mapping[str, Any] | InputT
) -> InputValidationResult[InputT]:
    """Validate ``data`` against ``model`` and report per-field problems."""

    if isinstance(data, model):
        return InputValidationResult(valid=True, value=data)
    if not isinstance(data, Mapping):
        return InputValidationResult(
            valid=False, errors={"__root__": "input must be a mapping"}
        )
    try:
        value = model.model_validate(data)
    except ValidationError as exc:
        return InputValidationResult(valid=False, errors=field_errors(exc))
    return InputValidationResult(valid=True, value=value)


def coerce_input(model: type[InputT], data: Mapping[str, Any] | InputT) -> InputT:
    """Return ``data`` as a validated ``model`` or raise :class:`InputValidationError`."""

    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise InputValidationError(
            "Invalid calculation input: input must be a mapping",
            {"__root__": "input must be a mapping"},
        )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InputValidationError(format_validation_error(exc), field_errors(exc)) from exc


def coerce_inputs(
    model: type[InputT],
    items: Iterable[Mapping[str, Any] | InputT],
    scope: str,
) -> list[InputT]:
    """Validate every entry of ``items``, reporting failures by position.

    Error keys read ``<scope>.<index>.<field>`` and all entries are checked
    before :class:`InputValidationError` is raised.
    """

    validated: list[InputT] = []
    errors: dict[str, str] = {}

    for index, entry in enumerate(items):
        result = validate_input(model, entry)
        if result.valid:
            validated.append(result.value)
            continue
        for location, message in result.errors.items():
            key = f"{scope}.{index}" if location == "__root__" else f"{scope}.{index}.{location}"
            errors[key] = message

    if errors:
        details = "; ".join(f"{key}: {value}" for key, value in errors.items())
        raise InputValidationError(f"Invalid {scope} input: {details}", errors)

    return validated
