"""Common parsing primitives for ingestion."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(slots=True)
class ParsedDataset:
    """Rows read from one input file, keyed by header."""

    records: List[Dict[str, Any]]
    metadata: Dict[str, Any]

    @property
    def row_count(self) -> int:
        return len(self.records)
