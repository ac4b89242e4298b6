"""Domain-specific calculation helpers."""

from .corporation import (
    CorporationTaxCalculator,
    calculate_corporation_tax,
    calculate_quarterly_instalments,
)
from .flat_rate import (
    CapitalGainsCalculator,
    ExciseCalculator,
    PropertyTaxCalculator,
    calculate_capital_gains,
    calculate_excise,
    calculate_property_tax,
)
from .nis import (
    NisCalculator,
    SelfEmployedNisCalculator,
    calculate_nis,
    calculate_self_employed_nis,
)
from .paye import PayeCalculator, calculate_deductions, calculate_paye
from .utils import (
    RateTableCalculator,
    allocate_progressive_tax,
    calculate_progressive_tax,
    due_in_following_month,
    format_percentage,
    marginal_rate,
    round_currency,
    round_rate,
    to_annual,
    to_monthly,
)
from .vat import (
    VatCalculator,
    calculate_vat,
    calculate_vat_items,
    calculate_vat_return,
    requires_vat_registration,
)
from .withholding import (
    WithholdingTaxCalculator,
    calculate_withholding,
    calculate_withholding_batch,
    calculate_withholding_return,
)

__all__ = [
    "CapitalGainsCalculator",
    "CorporationTaxCalculator",
    "ExciseCalculator",
    "NisCalculator",
    "PayeCalculator",
    "PropertyTaxCalculator",
    "RateTableCalculator",
    "SelfEmployedNisCalculator",
    "VatCalculator",
    "WithholdingTaxCalculator",
    "allocate_progressive_tax",
    "calculate_capital_gains",
    "calculate_corporation_tax",
    "calculate_deductions",
    "calculate_excise",
    "calculate_nis",
    "calculate_paye",
    "calculate_progressive_tax",
    "calculate_property_tax",
    "calculate_quarterly_instalments",
    "calculate_self_employed_nis",
    "calculate_vat",
    "calculate_vat_items",
    "calculate_vat_return",
    "calculate_withholding",
    "calculate_withholding_batch",
    "calculate_withholding_return",
    "due_in_following_month",
    "format_percentage",
    "marginal_rate",
    "requires_vat_registration",
    "round_currency",
    "round_rate",
    "to_annual",
    "to_monthly",
]
