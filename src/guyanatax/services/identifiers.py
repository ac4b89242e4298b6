"""Validation and canonical formatting of Guyanese identifiers.

Validation never raises for malformed values: every problem comes back as an
:class:`IdentifierValidationResult` with ``valid=False`` and a message suitable
for showing next to the form field. Canonical values validate to themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from guyanatax.models import IdentifierKind

__all__ = [
    "IDENTIFIER_FORMATS",
    "IdentifierFormat",
    "IdentifierValidationResult",
    "validate_identifier",
]

_SEPARATORS = re.compile(r"[-\s]")
_PHONE_SEPARATORS = re.compile(r"[-\s+().]")


@dataclass(frozen=True)
class IdentifierValidationResult:
    valid: bool
    error: str | None = None
    formatted: str | None = None


@dataclass(frozen=True)
class IdentifierFormat:
    """Pattern for the cleaned value and how to render its canonical form."""

    label: str
    pattern: re.Pattern[str]
    render: Callable[[re.Match[str]], str]
    example: str
    error: str
    separators: re.Pattern[str] = _SEPARATORS


IDENTIFIER_FORMATS: dict[IdentifierKind, IdentifierFormat] = {
    IdentifierKind.TIN: IdentifierFormat(
        label="TIN",
        pattern=re.compile(r"(\d{3})(\d{3})(\d{3})", re.ASCII),
        render=lambda match: "-".join(match.groups()),
        example="123-456-789",
        error="TIN must be exactly 9 digits",
    ),
    IdentifierKind.NIS: IdentifierFormat(
        label="NIS number",
        pattern=re.compile(r"([A-Z])(\d{6})", re.ASCII),
        render=lambda match: f"{match.group(1)}-{match.group(2)}",
        example="A-123456",
        error="NIS format: A-123456 (1 letter + 6 digits)",
    ),
    IdentifierKind.VAT: IdentifierFormat(
        label="VAT number",
        pattern=re.compile(r"V(\d{6,8})", re.ASCII),
        render=lambda match: f"V-{match.group(1)}",
        example="V-123456",
        error="VAT format: V-123456",
    ),
    IdentifierKind.PHONE: IdentifierFormat(
        label="Phone number",
        pattern=re.compile(r"(?:592)?(\d{3})(\d{4})", re.ASCII),
        render=lambda match: f"+592-{match.group(1)}-{match.group(2)}",
        example="+592-123-4567",
        error="Invalid Guyana phone number (+592-XXX-XXXX)",
        separators=_PHONE_SEPARATORS,
    ),
    IdentifierKind.NATIONAL_ID: IdentifierFormat(
        label="National ID",
        pattern=re.compile(r"\d{9}", re.ASCII),
        render=lambda match: match.group(0),
        example="144123456",
        error="National ID must be exactly 9 digits",
    ),
    IdentifierKind.PASSPORT: IdentifierFormat(
        label="Passport number",
        pattern=re.compile(r"[A-Z]\d{7}", re.ASCII),
        render=lambda match: match.group(0),
        example="R0712345",
        error="Passport format: R0712345 (1 letter + 7 digits)",
    ),
    IdentifierKind.BUSINESS_REGISTRATION: IdentifierFormat(
        label="Business registration",
        pattern=re.compile(r"C(\d{5,7})", re.ASCII),
        render=lambda match: f"C-{match.group(1)}",
        example="C-12345",
        error="Business registration format: C-12345",
    ),
}


def validate_identifier(
    kind: IdentifierKind | str,
    raw_value: str | None,
    *,
    required: bool = True,
) -> IdentifierValidationResult:
    """Validate ``raw_value`` as an identifier of ``kind``.

    Separators are ignored and letters upper-cased before matching. Empty
    input is an error for required fields and accepted, with no formatted
    value, otherwise.
    """

    try:
        identifier_format = IDENTIFIER_FORMATS[IdentifierKind(kind)]
    except ValueError:
        return IdentifierValidationResult(
            valid=False, error=f"Unknown identifier type: {kind}"
        )

    if not isinstance(raw_value, str):
        if raw_value is None:
            raw_value = ""
        else:
            return IdentifierValidationResult(
                valid=False, error=f"{identifier_format.label} must be text"
            )

    cleaned = identifier_format.separators.sub("", raw_value).upper()
    if not cleaned:
        if required:
            return IdentifierValidationResult(
                valid=False, error=f"{identifier_format.label} is required"
            )
        return IdentifierValidationResult(valid=True)

    match = identifier_format.pattern.fullmatch(cleaned)
    if match is None:
        return IdentifierValidationResult(valid=False, error=identifier_format.error)

    return IdentifierValidationResult(
        valid=True, formatted=identifier_format.render(match)
    )
