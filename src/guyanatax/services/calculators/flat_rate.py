"""Single-rate calculators: property tax, capital gains tax and excise tax."""

from __future__ import annotations

from guyanatax.config.rate_tables import RateTable
from guyanatax.models import (
    CapitalGainsInput,
    CapitalGainsResult,
    ExciseInput,
    FlatTaxResult,
    PropertyTaxInput,
)

from .utils import RateTableCalculator, floor_at_zero, round_currency


def calculate_property_tax(payload: PropertyTaxInput, table: RateTable) -> FlatTaxResult:
    """Tax net property value (value less liabilities) at the type's rate."""

    rate = table.property_tax.rates[payload.property_type]
    net_value = floor_at_zero(payload.property_value - payload.liabilities)
    return FlatTaxResult(
        tax_type="property",
        category=payload.property_type,
        taxable_amount=round_currency(net_value),
        rate=rate,
        tax=round_currency(net_value * rate),
        rate_table=table.id,
    )


def calculate_capital_gains(payload: CapitalGainsInput, table: RateTable) -> CapitalGainsResult:
    rate = table.capital_gains.rate
    gain = floor_at_zero(payload.sale_price - payload.cost_basis - payload.improvements)
    tax = gain * rate
    return CapitalGainsResult(
        tax_type="capital_gains",
        category=None,
        taxable_amount=round_currency(gain),
        rate=rate,
        tax=round_currency(tax),
        rate_table=table.id,
        capital_gain=round_currency(gain),
        net_proceeds=round_currency(payload.sale_price - tax),
    )


def calculate_excise(payload: ExciseInput, table: RateTable) -> FlatTaxResult:
    rate = table.excise_tax.rates[payload.product]
    return FlatTaxResult(
        tax_type="excise",
        category=payload.product,
        taxable_amount=round_currency(payload.amount),
        rate=rate,
        tax=round_currency(payload.amount * rate),
        rate_table=table.id,
    )


class PropertyTaxCalculator(RateTableCalculator[PropertyTaxInput, FlatTaxResult]):
    input_model = PropertyTaxInput
    calculation = staticmethod(calculate_property_tax)


class CapitalGainsCalculator(RateTableCalculator[CapitalGainsInput, CapitalGainsResult]):
    input_model = CapitalGainsInput
    calculation = staticmethod(calculate_capital_gains)


class ExciseCalculator(RateTableCalculator[ExciseInput, FlatTaxResult]):
    input_model = ExciseInput
    calculation = staticmethod(calculate_excise)


__all__ = [
    "CapitalGainsCalculator",
    "ExciseCalculator",
    "PropertyTaxCalculator",
    "calculate_capital_gains",
    "calculate_excise",
    "calculate_property_tax",
]
