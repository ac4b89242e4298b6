"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Generic, TypeVar

from guyanatax.config.rate_tables import (
    Bracket,
    RateTable,
    RateTableSet,
    load_rate_tables,
)
from guyanatax.config.schema import to_decimal
from guyanatax.models import CalculationInput, PayFrequency, coerce_input

MONEY_PLACES = Decimal("0.01")
RATE_PLACES = Decimal("0.0001")
ZERO = Decimal("0")


def round_currency(value: Decimal) -> Decimal:
    """Round monetary amounts to two decimals, halves away from zero.

    This is the only rounding step applied to calculator output.
    """

    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round rate values to four decimals."""

    return to_decimal(value).quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def format_percentage(value: Decimal) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = to_decimal(value) * 100
    if percentage == percentage.to_integral_value():
        return f"{int(percentage)}%"
    return f"{percentage.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)}%"


def floor_at_zero(value: Decimal) -> Decimal:
    return value if value > 0 else ZERO


def due_in_following_month(period: date, due_day: int) -> date:
    """Return ``due_day`` of the month after the month containing ``period``."""

    if period.month == 12:
        return date(period.year + 1, 1, due_day)
    return date(period.year, period.month + 1, due_day)


def to_annual(amount: Decimal, frequency: PayFrequency) -> Decimal:
    """Scale a per-period ``amount`` up to a year; the result is unrounded."""

    return to_decimal(amount) * frequency.periods_per_year


def to_monthly(amount: Decimal, frequency: PayFrequency) -> Decimal:
    """Convert a per-period ``amount`` to its monthly equivalent, unrounded."""

    if frequency is PayFrequency.MONTHLY:
        return to_decimal(amount)
    return to_annual(amount, frequency) / 12


@dataclass(frozen=True)
class BracketPortion:
    """Unrounded share of an amount that falls inside ``bracket``."""

    bracket: Bracket
    amount: Decimal
    tax: Decimal


def allocate_progressive_tax(
    amount: Decimal, brackets: Sequence[Bracket]
) -> list[BracketPortion]:
    """Split ``amount`` across ``brackets`` and tax each portion marginally.

    Every bracket appears in the result; those entirely above ``amount``
    carry zero.
    """

    taxable = floor_at_zero(amount)
    portions: list[BracketPortion] = []

    for bracket in brackets:
        if taxable <= bracket.lower:
            portion = ZERO
        elif bracket.upper is None or taxable < bracket.upper:
            portion = taxable - bracket.lower
        else:
            portion = bracket.upper - bracket.lower
        portions.append(BracketPortion(bracket=bracket, amount=portion, tax=portion * bracket.rate))

    return portions


def calculate_progressive_tax(amount: Decimal, brackets: Sequence[Bracket]) -> Decimal:
    """Calculate progressive tax for ``amount`` using ``brackets``."""

    return sum((portion.tax for portion in allocate_progressive_tax(amount, brackets)), ZERO)


def marginal_rate(amount: Decimal, brackets: Sequence[Bracket]) -> Decimal:
    """Return the rate applied to the last unit of ``amount``."""

    if amount <= 0:
        return brackets[0].rate
    for bracket in brackets:
        if bracket.upper is None or amount <= bracket.upper:
            return bracket.rate
    return brackets[-1].rate


InputT = TypeVar("InputT", bound=CalculationInput)
ResultT = TypeVar("ResultT")


class RateTableCalculator(Generic[InputT, ResultT]):
    """Resolve the rate table for a date and hand it to a pure calculation.

    Subclasses set ``input_model`` and ``calculation``; ``calculation`` receives
    the validated input and the resolved :class:`RateTable` and must not keep
    any state between calls.
    """

    input_model: type[InputT]
    calculation: Callable[[InputT, RateTable], ResultT]

    def __init__(self, rate_tables: RateTableSet | None = None) -> None:
        self._rate_tables = rate_tables

    @property
    def rate_tables(self) -> RateTableSet:
        return self._rate_tables if self._rate_tables is not None else load_rate_tables()

    def resolve(self, effective_date: date | None = None) -> RateTable:
        return self.rate_tables.resolve(effective_date or date.today())

    def compute(
        self,
        payload: InputT | Mapping[str, Any],
        effective_date: date | None = None,
    ) -> ResultT:
        request = coerce_input(self.input_model, payload)
        table = self.resolve(effective_date)
        return self.calculation(request, table)


__all__ = [
    "BracketPortion",
    "MONEY_PLACES",
    "RATE_PLACES",
    "RateTableCalculator",
    "ZERO",
    "allocate_progressive_tax",
    "calculate_progressive_tax",
    "due_in_following_month",
    "floor_at_zero",
    "format_percentage",
    "marginal_rate",
    "round_currency",
    "round_rate",
    "to_annual",
    "to_monthly",
]
