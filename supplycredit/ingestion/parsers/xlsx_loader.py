"""XLSX parser for ingestion."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .base import ParsedDataset


def parse_xlsx(path: Path, *, worksheet: str | None = None) -> ParsedDataset:
    try:
        workbook = load_workbook(path, data_only=True, read_only=True)
    except (BadZipFile, InvalidFileException) as exc:
        raise ValueError(f"{path.name} is not a readable workbook: {exc}") from exc
    try:
        if worksheet:
            if worksheet not in workbook.sheetnames:
                raise ValueError(f"Worksheet '{worksheet}' not found in {path.name}")
            sheet = workbook[worksheet]
        else:
            sheet = workbook.active
        rows = list(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()
    if not rows:
        return ParsedDataset(records=[], metadata={"columns": [], "worksheet": sheet.title})
    headers = [str(value).strip() if value is not None else "" for value in rows[0]]
    records: List[Dict[str, object]] = []
    for values in rows[1:]:
        if all(value is None for value in values):
            continue
        records.append(
            {
                headers[index] if index < len(headers) else f"column_{index}": value
                for index, value in enumerate(values)
            }
        )
    metadata = {
        "columns": headers,
        "worksheet": sheet.title,
        "source": path.name,
    }
    return ParsedDataset(records=records, metadata=metadata)
