"""supplycredit - supplier credit pre-screening for invoice factoring."""
from __future__ import annotations

from datetime import datetime
from importlib import metadata
from pathlib import Path

from supplycredit.core import StageContext, StageRunner, registry
from supplycredit.core.utils import new_run_id
from supplycredit.settings import Settings

__all__ = [
    "__version__",
    "StageContext",
    "StageRunner",
    "Settings",
    "registry",
    "bootstrap",
    "create_default_context",
]


def __getattr__(name: str):  # pragma: no cover - passthrough to package metadata
    if name == "__version__":
        try:
            return metadata.version("supplycredit")
        except metadata.PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(name)


def bootstrap() -> None:
    """Import stage modules to ensure registration has occurred."""

    from supplycredit import export, ingestion, scoring  # noqa: F401


def create_default_context(settings: Settings | None = None) -> StageContext:
    """Construct a default :class:`StageContext` for command-line runs."""

    settings = settings or Settings.load()
    settings.ensure_directories()
    timestamp = datetime.utcnow()
    return StageContext(
        settings=settings,
        run_id=new_run_id(timestamp),
        timestamp=timestamp,
        workspace=Path.cwd(),
    )
