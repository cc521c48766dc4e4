"""Version lookup for tracecalc.

A source checkout reads ``[project].version`` from pyproject.toml so that an
editable install never reports stale metadata; otherwise the installed
distribution metadata is used.
"""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DIST_NAME = "tracecalc"
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _checkout_version(pyproject: Path) -> str | None:
    """Version declared by a tracecalc pyproject.toml, if this is a checkout."""
    try:
        with open(pyproject, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DIST_NAME:
        return None
    return project.get("version")


def get_version() -> str:
    """Get version from a source checkout or the installed distribution."""
    checkout = _checkout_version(_PYPROJECT)
    if checkout:
        return checkout
    try:
        return _metadata_version(DIST_NAME)
    except PackageNotFoundError:
        return "0.0.0"
