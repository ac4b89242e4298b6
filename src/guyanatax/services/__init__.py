"""Service-layer helpers for the Guyana tax engine."""

from .formatting import CURRENCY_CODE, format_gyd
from .identifiers import IdentifierValidationResult, validate_identifier
from .payroll import PayrollEmployee, calculate_employee_taxes, run_payroll

__all__ = [
    "CURRENCY_CODE",
    "IdentifierValidationResult",
    "PayrollEmployee",
    "calculate_employee_taxes",
    "format_gyd",
    "run_payroll",
    "validate_identifier",
]
