"""Versioned rate table configuration."""

from .rate_tables import (
    ConfigurationError,
    RateTable,
    RateTableSet,
    UnsupportedPeriodError,
    available_tables,
    clear_caches,
    load_rate_table,
    load_rate_tables,
    resolve_rate_table,
)

__all__ = [
    "ConfigurationError",
    "RateTable",
    "RateTableSet",
    "UnsupportedPeriodError",
    "available_tables",
    "clear_caches",
    "load_rate_table",
    "load_rate_tables",
    "resolve_rate_table",
]
