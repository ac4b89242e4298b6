"""Closed category sets shared by rate tables, inputs and results."""

from __future__ import annotations

from enum import Enum


class PeriodType(str, Enum):
    """Pay period an NIS contribution is computed for."""

    MONTHLY = "monthly"
    WEEKLY = "weekly"


class PayFrequency(str, Enum):
    """How often an amount is paid; used to convert between pay periods."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


class VatCategory(str, Enum):
    STANDARD = "standard"
    ZERO_RATED = "zero_rated"
    EXEMPT = "exempt"


class AmountBasis(str, Enum):
    """Whether a VAT amount already includes the tax."""

    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


class CompanyCategory(str, Enum):
    NON_COMMERCIAL = "non_commercial"
    COMMERCIAL = "commercial"
    TELEPHONE = "telephone"


class CorporationTaxRule(str, Enum):
    BASE = "base"
    MINIMUM = "minimum"


class WithholdingCategory(str, Enum):
    """Payment types subject to withholding at source.

    The ``SECTION_7B*`` members map to the sub-sections of section 7B of the
    Income Tax Act and keep the statute reference as their value.
    """

    DIVIDENDS = "dividends"
    INTEREST = "interest"
    ROYALTIES = "royalties"
    CONTRACT_PAYMENTS = "contract_payments"
    SECTION_7B1 = "7B1"
    SECTION_7B2 = "7B2"
    SECTION_7B3 = "7B3"


class PropertyType(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class ExciseProduct(str, Enum):
    ALCOHOL = "alcohol"
    TOBACCO = "tobacco"
    FUEL = "fuel"


class IdentifierKind(str, Enum):
    TIN = "tin"
    NIS = "nis"
    VAT = "vat"
    PHONE = "phone"
    NATIONAL_ID = "national_id"
    PASSPORT = "passport"
    BUSINESS_REGISTRATION = "business_registration"


_PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BI_WEEKLY: 26,
    PayFrequency.MONTHLY: 12,
    PayFrequency.ANNUAL: 1,
}


__all__ = [
    "AmountBasis",
    "CompanyCategory",
    "CorporationTaxRule",
    "ExciseProduct",
    "IdentifierKind",
    "PayFrequency",
    "PeriodType",
    "PropertyType",
    "VatCategory",
    "WithholdingCategory",
]
