"""Typed inputs, results and category enums shared across the calculators.

Inputs are Pydantic models so that validation and per-field error reporting
stay in one place; results are lightweight frozen dataclasses built once the
arithmetic is done.
"""

from .enums import (
    AmountBasis,
    CompanyCategory,
    CorporationTaxRule,
    ExciseProduct,
    IdentifierKind,
    PayFrequency,
    PeriodType,
    PropertyType,
    VatCategory,
    WithholdingCategory,
)
from .inputs import (
    MAX_AMOUNT,
    CalculationInput,
    CapitalGainsInput,
    CorporationTaxInput,
    ExciseInput,
    InputValidationError,
    InputValidationResult,
    Money,
    NisInput,
    PayeInput,
    PropertyTaxInput,
    VatInput,
    WithholdingInput,
    WithholdingPayment,
    coerce_input,
    coerce_inputs,
    field_errors,
    format_validation_error,
    validate_input,
)
from .results import (
    BracketAmount,
    CapitalGainsResult,
    CorporationTaxResult,
    EmployeeTaxSummary,
    FlatTaxResult,
    InstalmentSchedule,
    NisResult,
    PayeDeductions,
    PayeResult,
    PayeeWithholding,
    PayrollRunSummary,
    PayrollTotals,
    QuarterlyInstalment,
    VatItemsSummary,
    VatResult,
    VatReturn,
    WithholdingBatchSummary,
    WithholdingResult,
    WithholdingReturn,
)

__all__ = [
    "AmountBasis",
    "BracketAmount",
    "CalculationInput",
    "CapitalGainsInput",
    "CapitalGainsResult",
    "CompanyCategory",
    "CorporationTaxInput",
    "CorporationTaxResult",
    "CorporationTaxRule",
    "EmployeeTaxSummary",
    "ExciseInput",
    "ExciseProduct",
    "FlatTaxResult",
    "IdentifierKind",
    "InputValidationError",
    "InputValidationResult",
    "InstalmentSchedule",
    "MAX_AMOUNT",
    "Money",
    "NisInput",
    "NisResult",
    "PayeDeductions",
    "PayeInput",
    "PayFrequency",
    "PayeResult",
    "PayeeWithholding",
    "PayrollRunSummary",
    "PayrollTotals",
    "PeriodType",
    "PropertyTaxInput",
    "PropertyType",
    "QuarterlyInstalment",
    "VatCategory",
    "VatInput",
    "VatItemsSummary",
    "VatResult",
    "VatReturn",
    "WithholdingCategory",
    "WithholdingBatchSummary",
    "WithholdingInput",
    "WithholdingPayment",
    "WithholdingResult",
    "WithholdingReturn",
    "coerce_input",
    "coerce_inputs",
    "field_errors",
    "format_validation_error",
    "validate_input",
]
