"""Frozen result records returned by the calculators.

Every monetary field has already been rounded once, at construction time, by
the calculator that produced it. ``as_dict`` keeps ``Decimal`` values intact so
report and export collaborators decide how to render them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from .enums import (
    AmountBasis,
    CompanyCategory,
    CorporationTaxRule,
    ExciseProduct,
    PeriodType,
    PropertyType,
    VatCategory,
    WithholdingCategory,
)


def _serialise(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ResultRecord):
        return value.as_dict()
    if isinstance(value, (list, tuple)):
        return [_serialise(item) for item in value]
    return value


class ResultRecord:
    """Mixin giving dataclass results a plain ``dict`` representation."""

    def as_dict(self) -> dict[str, Any]:
        return {
            entry.name: _serialise(getattr(self, entry.name))
            for entry in fields(self)  # type: ignore[arg-type]
        }


@dataclass(frozen=True)
class BracketAmount(ResultRecord):
    """Portion of taxable income falling in one bracket and the tax on it."""

    label: str
    lower: Decimal
    upper: Decimal | None
    rate: Decimal
    taxable_amount: Decimal
    tax: Decimal


@dataclass(frozen=True)
class PayeDeductions(ResultRecord):
    personal_allowance: Decimal
    child_allowance: Decimal
    insurance_deduction: Decimal
    overtime_exemption: Decimal

    @property
    def total(self) -> Decimal:
        return (
            self.personal_allowance
            + self.child_allowance
            + self.insurance_deduction
            + self.overtime_exemption
        )


@dataclass(frozen=True)
class PayeResult(ResultRecord):
    gross_income: Decimal
    deductions: PayeDeductions
    taxable_income: Decimal
    bracket_breakdown: tuple[BracketAmount, ...]
    total_tax: Decimal
    net_pay: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal
    rate_table: str


@dataclass(frozen=True)
class NisResult(ResultRecord):
    period_type: PeriodType
    insurable_earnings: Decimal
    contribution_base: Decimal
    employee_contribution: Decimal
    employer_contribution: Decimal
    total_contribution: Decimal
    rate_table: str
    due_date: date | None = None


@dataclass(frozen=True)
class VatResult(ResultRecord):
    category: VatCategory
    amount_basis: AmountBasis
    rate: Decimal
    net_amount: Decimal
    vat_amount: Decimal
    gross_amount: Decimal
    rate_table: str


@dataclass(frozen=True)
class CorporationTaxResult(ResultRecord):
    company_category: CompanyCategory
    rate: Decimal
    base_tax: Decimal
    minimum_tax: Decimal | None
    payable_tax: Decimal
    rule_applied: CorporationTaxRule
    profit_after_tax: Decimal
    rate_table: str


@dataclass(frozen=True)
class WithholdingResult(ResultRecord):
    category: WithholdingCategory
    rate: Decimal
    gross_payment: Decimal
    withheld_amount: Decimal
    net_payment: Decimal
    rate_table: str


@dataclass(frozen=True)
class FlatTaxResult(ResultRecord):
    """Result of a single-rate tax: ``taxable_amount x rate``."""

    tax_type: str
    category: PropertyType | ExciseProduct | None
    taxable_amount: Decimal
    rate: Decimal
    tax: Decimal
    rate_table: str


@dataclass(frozen=True)
class CapitalGainsResult(FlatTaxResult):
    capital_gain: Decimal = Decimal("0")
    net_proceeds: Decimal = Decimal("0")


@dataclass(frozen=True)
class EmployeeTaxSummary(ResultRecord):
    """PAYE and NIS for one employee in one pay period."""

    employee_id: str
    gross_pay: Decimal
    paye: PayeResult
    nis: NisResult
    total_deductions: Decimal
    net_pay: Decimal
    employer_cost: Decimal


@dataclass(frozen=True)
class PayrollTotals(ResultRecord):
    employee_count: int = 0
    total_gross_pay: Decimal = Decimal("0")
    total_paye: Decimal = Decimal("0")
    total_employee_nis: Decimal = Decimal("0")
    total_employer_nis: Decimal = Decimal("0")
    total_net_pay: Decimal = Decimal("0")
    total_employer_cost: Decimal = Decimal("0")


@dataclass(frozen=True)
class PayrollRunSummary(ResultRecord):
    employees: tuple[EmployeeTaxSummary, ...]
    totals: PayrollTotals
    rate_table: str
    engine_version: str
    timings: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class VatItemsSummary(ResultRecord):
    """Several VAT lines computed together, with totals per treatment."""

    items: tuple[VatResult, ...]
    net_total: Decimal
    vat_total: Decimal
    gross_total: Decimal
    standard_rated_amount: Decimal
    zero_rated_amount: Decimal
    exempt_amount: Decimal
    rate_table: str


@dataclass(frozen=True)
class VatReturn(ResultRecord):
    """Output VAT on sales netted against input VAT on purchases.

    A negative ``net_vat`` is a credit: ``refund_due`` is then set.
    """

    period_start: date
    period_end: date
    turnover: Decimal
    purchases: Decimal
    output_vat: Decimal
    input_vat: Decimal
    previous_balance: Decimal
    net_vat: Decimal
    refund_due: bool
    due_date: date
    sales_count: int
    purchase_count: int
    rate_table: str


@dataclass(frozen=True)
class PayeeWithholding(ResultRecord):
    payee_name: str
    payee_tin: str | None
    total_gross: Decimal
    total_withheld: Decimal
    payment_count: int


@dataclass(frozen=True)
class WithholdingReturn(ResultRecord):
    """Monthly return of tax withheld from payments, grouped by payee."""

    year: int
    month: int
    payments: tuple[WithholdingResult, ...]
    total_gross_payments: Decimal
    total_withheld: Decimal
    total_net_payments: Decimal
    payee_breakdown: tuple[PayeeWithholding, ...]
    due_date: date
    rate_table: str


@dataclass(frozen=True)
class WithholdingBatchSummary(ResultRecord):
    items: tuple[WithholdingResult, ...]
    total_gross_payments: Decimal
    total_withheld: Decimal
    total_net_payments: Decimal
    average_rate: Decimal
    rate_table: str


@dataclass(frozen=True)
class QuarterlyInstalment(ResultRecord):
    quarter: int
    due_date: date
    amount: Decimal
    cumulative: Decimal
    balance_remaining: Decimal


@dataclass(frozen=True)
class InstalmentSchedule(ResultRecord):
    """Advance corporation tax for a year, split into four equal payments."""

    tax_year: int
    estimated_tax: Decimal
    prior_year_basis: Decimal
    required_total: Decimal
    instalments: tuple[QuarterlyInstalment, ...]
    rate_table: str


__all__ = [
    "BracketAmount",
    "CapitalGainsResult",
    "CorporationTaxResult",
    "EmployeeTaxSummary",
    "FlatTaxResult",
    "InstalmentSchedule",
    "NisResult",
    "PayeDeductions",
    "PayeResult",
    "PayeeWithholding",
    "PayrollRunSummary",
    "PayrollTotals",
    "QuarterlyInstalment",
    "ResultRecord",
    "VatItemsSummary",
    "VatResult",
    "VatReturn",
    "WithholdingBatchSummary",
    "WithholdingResult",
    "WithholdingReturn",
]
