"""
Service name and version for log records and the OpenAPI document.

Lookup order:
  1. the installed `crudcore` distribution (wheels, containers);
  2. the `[project]` table of the nearest pyproject.toml above this module
     (editable checkouts);
  3. the defaults below.
"""

from functools import lru_cache
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

import tomllib

DISTRIBUTION = "crudcore"
DEFAULT_VERSION = "unknown"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    """Nearest pyproject.toml in `start` or up to `max_up - 1` of its parents."""
    for directory in [start, *start.parents][:max_up]:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


@lru_cache()
def _project_table() -> dict[str, Any]:
    pyproject = find_pyproject(Path(__file__).resolve().parent)
    if pyproject is None:
        return {}
    try:
        with pyproject.open("rb") as f:
            table = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return table if isinstance(table, dict) else {}


def get_project_name() -> str:
    try:
        return importlib_metadata.metadata(DISTRIBUTION)["Name"]
    except importlib_metadata.PackageNotFoundError:
        return _project_table().get("name", DISTRIBUTION)


def get_project_version() -> str:
    try:
        return importlib_metadata.version(DISTRIBUTION)
    except importlib_metadata.PackageNotFoundError:
        return str(_project_table().get("version", DEFAULT_VERSION))
