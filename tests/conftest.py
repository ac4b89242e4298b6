"""Test configuration utilities and shared fixtures."""

import sys
from datetime import date
from pathlib import Path
from shutil import copy2

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from guyanatax.config import rate_tables  # noqa: E402
from guyanatax.config.schema import RateTable, RateTableSet  # noqa: E402

MID_2025 = date(2025, 6, 1)


@pytest.fixture()
def tables() -> RateTableSet:
    """Return the bundled rate tables."""

    return rate_tables.load_rate_tables()


@pytest.fixture()
def table_2025(tables: RateTableSet) -> RateTable:
    return tables.resolve(MID_2025)


@pytest.fixture()
def isolated_rate_table_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary copy of the bundled tables patched into the loader."""

    original_directory = rate_tables.CONFIG_DIRECTORY
    for source in original_directory.glob("*.yaml"):
        copy2(source, tmp_path / source.name)

    monkeypatch.setattr(rate_tables, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(rate_tables, "MANIFEST_FILE", tmp_path / "manifest.yaml")
    rate_tables.clear_caches()

    yield tmp_path

    rate_tables.clear_caches()
