"""CSV parser for ingestion."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List

from .base import ParsedDataset


def parse_csv(path: Path, *, encoding: str | None = None) -> ParsedDataset:
    encoding = encoding or "utf-8-sig"
    with path.open("r", encoding=encoding, newline="") as handle:
        reader = csv.DictReader(handle)
        records: List[Dict[str, str]] = [
            {key.strip(): (value or "").strip() for key, value in row.items() if key}
            for row in reader
        ]
    metadata = {
        "columns": reader.fieldnames or [],
        "encoding": encoding,
        "source": path.name,
    }
    return ParsedDataset(records=records, metadata=metadata)
