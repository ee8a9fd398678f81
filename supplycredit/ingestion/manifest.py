"""Source manifest loader for ingestion."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping

import yaml

RECORD_KINDS = ("suppliers", "financial_statements", "transactions", "documents")


class ManifestError(RuntimeError):
    """Raised when the source manifest cannot be loaded."""


@dataclass(slots=True)
class SourceDefinition:
    """One input file and the record type it carries."""

    id: str
    kind: str
    path: Path
    format: str
    encoding: str | None = None
    worksheet: str | None = None

    @property
    def load_order(self) -> int:
        return RECORD_KINDS.index(self.kind)


def _validate(entry: Mapping[str, object]) -> SourceDefinition:
    required = {"id", "kind", "path"}
    missing = required - set(entry)
    if missing:
        raise ManifestError(f"Missing required keys {sorted(missing)} for source definition")
    kind = str(entry["kind"])
    if kind not in RECORD_KINDS:
        raise ManifestError(f"Unknown record kind '{kind}' for source {entry['id']}")
    path = Path(str(entry["path"]))
    return SourceDefinition(
        id=str(entry["id"]),
        kind=kind,
        path=path,
        format=str(entry.get("format") or path.suffix.lstrip(".") or "csv").lower(),
        encoding=str(entry["encoding"]) if entry.get("encoding") else None,
        worksheet=str(entry["worksheet"]) if entry.get("worksheet") else None,
    )


def load_manifest(path: Path) -> List[SourceDefinition]:
    """Load the YAML manifest at *path*, ordered so suppliers load first."""

    if not path.exists():
        raise ManifestError(f"Source manifest not found at {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ManifestError(f"Failed to parse manifest: {exc}") from exc
    entries = payload.get("sources") if isinstance(payload, Mapping) else None
    if not entries:
        raise ManifestError("Manifest does not define any sources under 'sources'")
    sources = [_validate(entry) for entry in entries]
    return sorted(sources, key=lambda source: source.load_order)
