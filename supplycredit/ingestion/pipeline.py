"""Ingestion pipeline implementation."""
from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Set, Tuple

from supplycredit.core.stage import StageContext
from supplycredit.scoring.repository import SQLiteRepository

from .manifest import ManifestError, SourceDefinition, load_manifest
from .parsers import ParsedDataset, parse_file
from .records import CONVERTERS, RecordValidationError
from .storage import IngestionLogEntry, IngestionStore

logger = logging.getLogger(__name__)


def _checksum(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(65536), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _resolve(path: Path, data_dir: Path) -> Path:
    return path if path.is_absolute() else data_dir / path


def _writer(repository: SQLiteRepository, kind: str) -> Callable[[Iterable], int]:
    return {
        "suppliers": repository.add_suppliers,
        "financial_statements": repository.add_financial_statements,
        "transactions": repository.add_transactions,
        "documents": repository.add_documents,
    }[kind]


def convert_rows(
    dataset: ParsedDataset, source: SourceDefinition, known_suppliers: Set[str]
) -> Tuple[List[object], List[Dict[str, object]]]:
    """Convert parsed rows into records, collecting the rejected ones.

    Rows other than suppliers must reference a supplier that is already loaded.
    """

    convert = CONVERTERS[source.kind]
    accepted: List[object] = []
    rejected: List[Dict[str, object]] = []
    for index, row in enumerate(dataset.records, start=2):
        try:
            record = convert(row)
        except RecordValidationError as exc:
            rejected.append({"row": index, "error": str(exc)})
            continue
        supplier_id = getattr(record, "supplier_id")
        if source.kind != "suppliers" and supplier_id not in known_suppliers:
            rejected.append({"row": index, "error": f"Unknown supplier '{supplier_id}'"})
            continue
        accepted.append(record)
    for item in rejected:
        logger.warning("Rejected row %s of source %s: %s", item["row"], source.id, item["error"])
    return accepted, rejected


def run_pipeline(context: StageContext) -> List[IngestionLogEntry]:
    """Execute the ingestion pipeline using the provided *context*."""

    settings = context.settings
    settings.ensure_directories()
    try:
        sources = load_manifest(settings.sources_manifest)
    except ManifestError as exc:
        logger.error("Unable to load source manifest: %s", exc)
        raise

    run_id = context.run_id
    store = IngestionStore(settings.sqlite_path)
    repository = SQLiteRepository(settings.sqlite_path)
    known_suppliers = {supplier.supplier_id for supplier in repository.list_suppliers()}
    results: List[IngestionLogEntry] = []

    logger.info("Loaded %d sources from manifest", len(sources))
    for source in sources:
        path = _resolve(source.path, settings.data_dir)
        logger.info("Processing %s source %s from %s", source.kind, source.id, path)
        started = datetime.utcnow()
        try:
            checksum = _checksum(path)
            parsed = parse_file(path, source)
            records, rejected = convert_rows(parsed, source, known_suppliers)
            loaded = _writer(repository, source.kind)(records)
            if source.kind == "suppliers":
                known_suppliers.update(record.supplier_id for record in records)
            entry = IngestionLogEntry(
                run_id=run_id,
                source_id=source.id,
                kind=source.kind,
                format=source.format,
                local_path=str(path),
                checksum=checksum,
                record_count=parsed.row_count,
                loaded_count=loaded,
                rejected_count=len(rejected),
                status="partial" if rejected else "success",
                error=None,
                started_at=started,
                completed_at=datetime.utcnow(),
                metadata={"parse": parsed.metadata, "rejected": rejected},
            )
        except (OSError, ValueError) as exc:
            logger.exception("Failed to process source %s: %s", source.id, exc)
            entry = IngestionLogEntry(
                run_id=run_id,
                source_id=source.id,
                kind=source.kind,
                format=source.format,
                local_path=str(path),
                checksum="",
                record_count=0,
                loaded_count=0,
                rejected_count=0,
                status="failed",
                error=str(exc),
                started_at=started,
                completed_at=datetime.utcnow(),
            )
        store.record(entry)
        results.append(entry)
        logger.info(
            "Recorded ingestion for %s with status %s (%d loaded, %d rejected)",
            entry.source_id,
            entry.status,
            entry.loaded_count,
            entry.rejected_count,
        )
    logger.info("Ingestion pipeline complete for run %s", run_id)
    logger.debug(
        "Run summary: %s",
        json.dumps({entry.source_id: entry.status for entry in results}),
    )
    return results
