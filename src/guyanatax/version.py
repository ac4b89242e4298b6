"""Engine version reported alongside payroll runs and validator output."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "guyanatax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"

_SECTION = re.compile(r"^\[(?P<name>[^\]]+)\]$")
_VERSION = re.compile(r'^version\s*=\s*"(?P<value>[^"]*)"')


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version.

    Source checkouts without an install (tests run straight from ``src/``)
    fall back to the ``[project]`` table of ``pyproject.toml``.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    if not path.exists():  # pragma: no cover - repository invariant
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    section: str | None = None
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        heading = _SECTION.match(line)
        if heading:
            section = heading.group("name")
            continue
        if section != "project":
            continue
        found = _VERSION.match(line)
        if found and found.group("value"):
            return found.group("value")

    raise RuntimeError(f"No [project] version declared in {path}")


__all__ = ["PACKAGE_NAME", "get_project_version", "read_pyproject_version"]
