"""
Version lookup for CSM.

A source checkout reports the `[project].version` of its `pyproject.toml`,
so editable installs never lag behind a version bump. Installed wheels
report the distribution metadata.
"""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "csm"
UNKNOWN_VERSION = "0.0.0"

# src/csm/_version.py -> repository root
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _pyproject_version(pyproject: Path) -> str | None:
    if not pyproject.is_file():
        return None
    try:
        with open(pyproject, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DISTRIBUTION:
        return None
    version = project.get("version")
    return version if isinstance(version, str) else None


def get_version(pyproject: Path = _PYPROJECT) -> str:
    """Version of the checkout at `pyproject`, else of the installed distribution."""
    version = _pyproject_version(pyproject)
    if version is not None:
        return version
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
