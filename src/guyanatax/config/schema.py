"""Pydantic models describing the versioned rate table schema."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Mapping, Sequence, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

from guyanatax.models.enums import (
    CompanyCategory,
    ExciseProduct,
    PeriodType,
    PropertyType,
    WithholdingCategory,
)


class ConfigurationError(ValueError):
    """Raised when rate table values violate schema expectations."""


class UnsupportedPeriodError(LookupError):
    """Raised when no rate table covers the requested effective date."""

    def __init__(self, effective_date: date) -> None:
        super().__init__(f"No rate table covers {effective_date.isoformat()}")
        self.effective_date = effective_date


def to_decimal(value: Any) -> Decimal:
    """Convert ``value`` to :class:`~decimal.Decimal` without float artefacts.

    Strings of the form ``"1/3"`` are accepted so that fractional allowances can
    be declared exactly in YAML.
    """

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ConfigurationError("Boolean values are not valid amounts")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            if "/" in text:
                numerator, _, denominator = text.partition("/")
                return Decimal(numerator.strip()) / Decimal(denominator.strip())
            return Decimal(text)
        except (InvalidOperation, ZeroDivisionError) as exc:
            raise ConfigurationError(f"'{value}' is not a valid decimal amount") from exc
    raise ConfigurationError(f"Unsupported amount type: {type(value).__name__}")


Amount = Annotated[Decimal, BeforeValidator(to_decimal)]


def _freeze_mapping(value: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(value))


KT = TypeVar("KT")
VT = TypeVar("VT")

# Read-only view so a cached table cannot be altered through its rate maps.
FrozenMapping = Annotated[Mapping[KT, VT], AfterValidator(_freeze_mapping)]


def _require_all(mapping: Mapping[Any, Any], members: type[Enum], scope: str) -> None:
    missing = [member.value for member in members if member not in mapping]
    if missing:
        raise ConfigurationError(f"{scope} is missing rates for: {', '.join(missing)}")


def _require_non_negative(mapping: Mapping[Any, Decimal], scope: str) -> None:
    for key, rate in mapping.items():
        if rate < 0:
            label = key.value if isinstance(key, Enum) else key
            raise ConfigurationError(f"{scope} rate for '{label}' must be non-negative")


def as_calendar_date(value: date) -> date:
    """Drop the time part of a ``datetime``; plain dates pass through."""

    if isinstance(value, datetime):
        return value.date()
    return value


def _require_due_day(value: int, scope: str) -> None:
    if not 1 <= value <= 28:
        raise ConfigurationError(f"{scope} due day must fall between 1 and 28")


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class Bracket(ImmutableModel):
    """A single band of a progressive schedule.

    ``upper`` is inclusive; ``None`` marks the open-ended top band.
    """

    lower: Amount = Decimal("0")
    upper: Amount | None = None
    rate: Amount
    label: str = ""
    pending_confirmation: bool = False
    estimate: bool = False

    @model_validator(mode="after")
    def _validate_values(self) -> Bracket:
        if self.rate < 0 or self.rate > 1:
            raise ConfigurationError("Bracket rates must be between 0 and 1")
        if self.lower < 0:
            raise ConfigurationError("Bracket lower bounds must be non-negative")
        if self.upper is not None and self.upper <= self.lower:
            raise ConfigurationError("Bracket upper bounds must exceed their lower bound")
        return self


def validate_bracket_sequence(brackets: Sequence[Bracket]) -> None:
    """Ensure ``brackets`` cover ``[0, inf)`` contiguously without overlaps."""

    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")
    if brackets[0].lower != 0:
        raise ConfigurationError("The first tax bracket must start at zero")
    for previous, current in zip(brackets, brackets[1:]):
        if previous.upper is None:
            raise ConfigurationError("Only the final tax bracket may be open-ended")
        if current.lower < previous.upper:
            raise ConfigurationError(
                f"Tax brackets overlap at {current.lower} (previous band ends at {previous.upper})"
            )
        if current.lower > previous.upper:
            raise ConfigurationError(
                f"Tax brackets leave a gap between {previous.upper} and {current.lower}"
            )
    if brackets[-1].upper is not None:
        raise ConfigurationError("Final tax bracket must have an open upper bound")


class PayeRates(ImmutableModel):
    """Monthly PAYE allowances, deduction caps and the progressive schedule."""

    personal_allowance: Amount
    allowance_fraction: Amount
    child_allowance: Amount
    insurance_deduction_rate: Amount
    insurance_deduction_cap: Amount
    overtime_exemption_cap: Amount
    max_allowance_children: int | None = None
    brackets: Sequence[Bracket] = Field(alias="tax_brackets")

    @field_validator("brackets", mode="after")
    @classmethod
    def _freeze_brackets(cls, value: Sequence[Bracket]) -> Sequence[Bracket]:
        return tuple(value)

    @model_validator(mode="after")
    def _validate_config(self) -> PayeRates:
        for field_name in (
            "personal_allowance",
            "child_allowance",
            "insurance_deduction_cap",
            "overtime_exemption_cap",
        ):
            if getattr(self, field_name) < 0:
                raise ConfigurationError(f"PAYE '{field_name}' must be non-negative")
        for field_name in ("allowance_fraction", "insurance_deduction_rate"):
            value = getattr(self, field_name)
            if value < 0 or value > 1:
                raise ConfigurationError(f"PAYE '{field_name}' must be between 0 and 1")
        if self.max_allowance_children is not None and self.max_allowance_children < 0:
            raise ConfigurationError("PAYE 'max_allowance_children' must be non-negative")
        validate_bracket_sequence(self.brackets)
        return self


class NisPeriodRates(ImmutableModel):
    """Ceiling and contribution maxima for one pay period."""

    ceiling: Amount
    max_employee_contribution: Amount
    max_employer_contribution: Amount

    @model_validator(mode="after")
    def _validate_amounts(self) -> NisPeriodRates:
        for field_name in ("ceiling", "max_employee_contribution", "max_employer_contribution"):
            if getattr(self, field_name) < 0:
                raise ConfigurationError(f"NIS '{field_name}' must be non-negative")
        return self


class NisRates(ImmutableModel):
    """National Insurance contribution rates."""

    employee_rate: Amount
    employer_rate: Amount
    periods: FrozenMapping[PeriodType, NisPeriodRates]
    due_day: int = 15

    @model_validator(mode="after")
    def _validate_rates(self) -> NisRates:
        for label, value in {
            "employee": self.employee_rate,
            "employer": self.employer_rate,
        }.items():
            if value < 0 or value > 1:
                raise ConfigurationError(f"NIS {label} rate must be between 0 and 1")
        _require_all(self.periods, PeriodType, "NIS periods")
        _require_due_day(self.due_day, "NIS")
        return self

    def for_period(self, period: PeriodType) -> NisPeriodRates:
        return self.periods[period]


class VatRates(ImmutableModel):
    """Value-added tax settings."""

    standard_rate: Amount
    registration_threshold: Amount
    return_due_day: int = 21

    @model_validator(mode="after")
    def _validate_rates(self) -> VatRates:
        if self.standard_rate < 0 or self.standard_rate > 1:
            raise ConfigurationError("VAT standard rate must be between 0 and 1")
        if self.registration_threshold < 0:
            raise ConfigurationError("VAT registration threshold must be non-negative")
        _require_due_day(self.return_due_day, "VAT")
        return self


class MinimumTaxConfig(ImmutableModel):
    """Turnover-based floor and the company categories it applies to."""

    rate: Amount
    applies_to: Sequence[CompanyCategory] = (CompanyCategory.COMMERCIAL,)

    @field_validator("applies_to", mode="before")
    @classmethod
    def _coerce_applies_to(cls, value: Any) -> Sequence[Any]:
        if value is None:
            return ()
        if isinstance(value, (str, bytes)):
            raise ConfigurationError("'applies_to' must be a list of company categories")
        return tuple(value)

    @model_validator(mode="after")
    def _validate_rate(self) -> MinimumTaxConfig:
        if self.rate < 0 or self.rate > 1:
            raise ConfigurationError("Minimum tax rate must be between 0 and 1")
        return self

    def applies(self, category: CompanyCategory) -> bool:
        return category in self.applies_to


class CorporationTaxRates(ImmutableModel):
    """Profit-based rates per company category plus the minimum tax floor."""

    rates: FrozenMapping[CompanyCategory, Amount]
    minimum_tax: MinimumTaxConfig
    instalment_uplift: Amount = Decimal("1.10")
    instalment_due_day: int = 15

    @model_validator(mode="after")
    def _validate_rates(self) -> CorporationTaxRates:
        _require_all(self.rates, CompanyCategory, "Corporation tax")
        _require_non_negative(self.rates, "Corporation tax")
        if self.instalment_uplift < 1:
            raise ConfigurationError("Corporation tax 'instalment_uplift' must be at least 1")
        _require_due_day(self.instalment_due_day, "Corporation tax")
        return self


class PropertyTaxRates(ImmutableModel):
    rates: FrozenMapping[PropertyType, Amount]

    @model_validator(mode="after")
    def _validate_rates(self) -> PropertyTaxRates:
        _require_all(self.rates, PropertyType, "Property tax")
        _require_non_negative(self.rates, "Property tax")
        return self


class WithholdingTaxRates(ImmutableModel):
    rates: FrozenMapping[WithholdingCategory, Amount]
    return_due_day: int = 15

    @model_validator(mode="after")
    def _validate_rates(self) -> WithholdingTaxRates:
        _require_all(self.rates, WithholdingCategory, "Withholding tax")
        _require_non_negative(self.rates, "Withholding tax")
        _require_due_day(self.return_due_day, "Withholding tax")
        return self


class CapitalGainsRates(ImmutableModel):
    rate: Amount

    @model_validator(mode="after")
    def _validate_rate(self) -> CapitalGainsRates:
        if self.rate < 0:
            raise ConfigurationError("Capital gains rate must be non-negative")
        return self


class ExciseTaxRates(ImmutableModel):
    rates: FrozenMapping[ExciseProduct, Amount]

    @model_validator(mode="after")
    def _validate_rates(self) -> ExciseTaxRates:
        _require_all(self.rates, ExciseProduct, "Excise tax")
        _require_non_negative(self.rates, "Excise tax")
        return self


class RateTable(ImmutableModel):
    """All rates, thresholds and ceilings in force for one effective period.

    ``effective_from`` is inclusive and ``effective_to`` exclusive; a missing
    ``effective_to`` leaves the table open-ended.
    """

    id: str
    effective_from: date
    effective_to: date | None = None
    meta: FrozenMapping[str, Any] = Field(default_factory=dict)
    paye: PayeRates
    nis: NisRates
    vat: VatRates
    corporation_tax: CorporationTaxRates
    property_tax: PropertyTaxRates
    withholding_tax: WithholdingTaxRates
    capital_gains: CapitalGainsRates
    excise_tax: ExciseTaxRates

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Rate table must define a mapping at the top level")
        prepared = dict(data)
        if prepared.get("meta") is None:
            prepared["meta"] = {}
        elif not isinstance(prepared["meta"], Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")
        if "id" in prepared:
            prepared["id"] = str(prepared["id"])
        return prepared

    @model_validator(mode="after")
    def _validate_period(self) -> Self:
        if self.effective_to is not None and self.effective_to <= self.effective_from:
            raise ConfigurationError(
                f"Rate table '{self.id}' must end after it starts"
            )
        return self

    def covers(self, effective_date: date) -> bool:
        effective_date = as_calendar_date(effective_date)
        if effective_date < self.effective_from:
            return False
        return self.effective_to is None or effective_date < self.effective_to


class RateTableSet(ImmutableModel):
    """Ordered, non-overlapping collection of rate tables."""

    tables: Sequence[RateTable]

    @model_validator(mode="after")
    def _validate_tables(self) -> RateTableSet:
        ordered = tuple(sorted(self.tables, key=lambda table: table.effective_from))
        if not ordered:
            raise ConfigurationError("At least one rate table must be configured")
        seen: set[str] = set()
        for table in ordered:
            if table.id in seen:
                raise ConfigurationError(f"Duplicate rate table id '{table.id}'")
            seen.add(table.id)
        for previous, current in zip(ordered, ordered[1:]):
            if previous.effective_to is None or previous.effective_to > current.effective_from:
                raise ConfigurationError(
                    f"Rate tables '{previous.id}' and '{current.id}' overlap"
                )
        object.__setattr__(self, "tables", ordered)
        return self

    def resolve(self, effective_date: date) -> RateTable:
        """Return the latest-starting table covering ``effective_date``.

        A ``datetime`` resolves by its calendar date.
        """

        effective_date = as_calendar_date(effective_date)
        for table in reversed(self.tables):
            if table.covers(effective_date):
                return table
        raise UnsupportedPeriodError(effective_date)

    def get(self, table_id: str) -> RateTable:
        for table in self.tables:
            if table.id == table_id:
                return table
        raise KeyError(table_id)

    @computed_field
    @property
    def table_ids(self) -> tuple[str, ...]:
        return tuple(table.id for table in self.tables)


class RateTableManifestEntry(ImmutableModel):
    """Entry describing a configured rate table file."""

    id: str
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.id}.yaml"


class RateTableManifest(ImmutableModel):
    """Manifest describing the available rate table files."""

    tables: Sequence[RateTableManifestEntry]

    @model_validator(mode="after")
    def _validate_entries(self) -> RateTableManifest:
        seen: set[str] = set()
        for entry in self.tables:
            if entry.id in seen:
                raise ConfigurationError(
                    f"Duplicate rate table '{entry.id}' declared in the manifest"
                )
            seen.add(entry.id)
        return self

    def get_entry(self, table_id: str) -> RateTableManifestEntry:
        for entry in self.tables:
            if entry.id == table_id:
                return entry
        raise KeyError(table_id)

    @computed_field
    @property
    def table_ids(self) -> tuple[str, ...]:
        return tuple(entry.id for entry in self.tables)


__all__ = [
    "Amount",
    "Bracket",
    "CapitalGainsRates",
    "ConfigurationError",
    "CorporationTaxRates",
    "ExciseTaxRates",
    "ImmutableModel",
    "MinimumTaxConfig",
    "NisPeriodRates",
    "NisRates",
    "PayeRates",
    "PropertyTaxRates",
    "RateTable",
    "RateTableManifest",
    "RateTableManifestEntry",
    "RateTableSet",
    "UnsupportedPeriodError",
    "ValidationError",
    "VatRates",
    "WithholdingTaxRates",
    "as_calendar_date",
    "to_decimal",
    "validate_bracket_sequence",
]
