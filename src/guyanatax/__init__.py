"""Versioned tax computation engine for Guyana's statutory taxes.

Every calculator resolves the rate table in force on the requested date and
returns a frozen result carrying that table's id, so a figure can always be
traced back to the published rates it was computed from.
"""

from .config import (
    ConfigurationError,
    UnsupportedPeriodError,
    load_rate_tables,
    resolve_rate_table,
)
from .models import InputValidationError, validate_input
from .services import format_gyd, run_payroll, validate_identifier
from .services.calculators import (
    CapitalGainsCalculator,
    CorporationTaxCalculator,
    ExciseCalculator,
    NisCalculator,
    PayeCalculator,
    PropertyTaxCalculator,
    SelfEmployedNisCalculator,
    VatCalculator,
    WithholdingTaxCalculator,
    requires_vat_registration,
)
from .version import get_project_version

__version__ = get_project_version()

__all__ = [
    "CapitalGainsCalculator",
    "ConfigurationError",
    "CorporationTaxCalculator",
    "ExciseCalculator",
    "InputValidationError",
    "NisCalculator",
    "PayeCalculator",
    "PropertyTaxCalculator",
    "SelfEmployedNisCalculator",
    "UnsupportedPeriodError",
    "VatCalculator",
    "WithholdingTaxCalculator",
    "format_gyd",
    "get_project_version",
    "load_rate_tables",
    "requires_vat_registration",
    "resolve_rate_table",
    "run_payroll",
    "validate_identifier",
    "validate_input",
]
