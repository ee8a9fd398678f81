"""Miscellaneous helpers for the supplycredit runtime."""
from __future__ import annotations

from datetime import datetime
from importlib import metadata

__all__ = ["engine_version", "new_run_id"]


def engine_version() -> str:
    """Return the installed package version, recorded alongside exports."""

    try:
        return metadata.version("supplycredit")
    except metadata.PackageNotFoundError:  # pragma: no cover - source checkout
        return "0.0.0"


def new_run_id(moment: datetime) -> str:
    return moment.strftime("%Y%m%d%H%M%S")
