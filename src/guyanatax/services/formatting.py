"""Display helpers for Guyana dollar amounts."""

from __future__ import annotations

from decimal import Decimal
from typing import Final

from guyanatax.config.schema import to_decimal

from .calculators.utils import format_percentage, round_currency

CURRENCY_CODE: Final = "GYD"


def format_gyd(amount: Decimal | int | float | str, include_symbol: bool = True) -> str:
    """Render ``amount`` as ``GYD 1,234.56``.

    Amounts are rounded half-up to cents first, so already-rounded results
    render unchanged. Negative amounts put the sign before the currency code.
    """

    rounded = round_currency(to_decimal(amount))
    sign = "-" if rounded < 0 else ""
    body = f"{abs(rounded):,.2f}"
    if include_symbol:
        return f"{sign}{CURRENCY_CODE} {body}"
    return f"{sign}{body}"


__all__ = ["CURRENCY_CODE", "format_gyd", "format_percentage"]
