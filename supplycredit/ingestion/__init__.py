"""Supplier data ingestion stage."""
from __future__ import annotations

import logging

from supplycredit.core import register_stage
from supplycredit.core.stage import StageContext

from .pipeline import run_pipeline

logger = logging.getLogger(__name__)


@register_stage(
    "ingest", "Load supplier, financial, transaction and document files.", order=10
)
def run(context: StageContext) -> None:
    """Execute the ingestion pipeline and summarise the outcome."""

    logger.info("Starting ingestion with data directory %s", context.settings.data_dir)
    results = run_pipeline(context)
    loaded = sum(entry.loaded_count for entry in results)
    rejected = sum(entry.rejected_count for entry in results)
    failures = sum(1 for entry in results if entry.status == "failed")
    logger.info(
        "Ingestion completed: %d record(s) loaded, %d rejected, %d failed source(s)",
        loaded,
        rejected,
        failures,
    )
