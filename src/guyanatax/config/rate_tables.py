"""Configuration loader for the versioned rate tables."""

from __future__ import annotations

import logging
import os
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    Bracket,
    CapitalGainsRates,
    ConfigurationError,
    CorporationTaxRates,
    ExciseTaxRates,
    MinimumTaxConfig,
    NisPeriodRates,
    NisRates,
    PayeRates,
    PropertyTaxRates,
    RateTable,
    RateTableManifest,
    RateTableManifestEntry,
    RateTableSet,
    UnsupportedPeriodError,
    VatRates,
    WithholdingTaxRates,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(
    os.getenv("GUYANATAX_RATE_TABLE_DIR")
    or Path(__file__).resolve().parent / "data"
)
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> RateTableManifest:
    """Load and cache the rate table manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Rate table manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return RateTableManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[RateTableManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().tables


@lru_cache(maxsize=16)
def load_rate_table(table_id: str) -> RateTable:
    """Load a single rate table from disk."""

    try:
        manifest_entry = load_manifest().get_entry(table_id)
    except KeyError as exc:
        raise FileNotFoundError(
            f"Rate table '{table_id}' not declared in manifest"
        ) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Rate table file for '{table_id}' missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("id", table_id)

    try:
        table = RateTable.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Rate table validation failed for '{table_id}': {error}"
        ) from error

    if table.id != table_id:
        raise ConfigurationError(
            f"Rate table id mismatch: expected '{table_id}', found '{table.id}'"
        )

    _LOGGER.debug(
        "Loaded rate table %s (%s to %s)",
        table.id,
        table.effective_from,
        table.effective_to or "open",
    )
    return table


@lru_cache(maxsize=1)
def load_rate_tables() -> RateTableSet:
    """Load every active table in the manifest and check they do not overlap."""

    tables = [
        load_rate_table(entry.id)
        for entry in manifest_entries()
        if entry.status != "retired"
    ]

    try:
        return RateTableSet(tables=tables)
    except ValidationError as error:
        raise ConfigurationError(f"Rate table set is inconsistent: {error}") from error


def resolve_rate_table(effective_date: date | None = None) -> RateTable:
    """Return the rate table in force on ``effective_date`` (default: today)."""

    target = effective_date or date.today()
    table = load_rate_tables().resolve(target)
    _LOGGER.debug("Resolved rate table %s for %s", table.id, target.isoformat())
    return table


def available_tables() -> Sequence[str]:
    """Return the table identifiers declared in the manifest."""

    return load_manifest().table_ids


def clear_caches() -> None:
    """Drop cached tables so the next lookup re-reads the configuration."""

    load_rate_tables.cache_clear()
    load_rate_table.cache_clear()
    load_manifest.cache_clear()


__all__ = [
    "Bracket",
    "CONFIG_DIRECTORY",
    "CapitalGainsRates",
    "ConfigurationError",
    "CorporationTaxRates",
    "ExciseTaxRates",
    "MANIFEST_FILE",
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
    "VatRates",
    "WithholdingTaxRates",
    "available_tables",
    "clear_caches",
    "load_manifest",
    "load_rate_table",
    "load_rate_tables",
    "manifest_entries",
    "resolve_rate_table",
]
