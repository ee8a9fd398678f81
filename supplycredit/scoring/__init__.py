"""Supplier credit scoring stage."""
from __future__ import annotations

import logging

from supplycredit.core import register_stage
from supplycredit.core.stage import StageContext

from .pipeline import run_pipeline

logger = logging.getLogger(__name__)


@register_stage(
    "score", "Recompute credit scores and recommendations for every supplier.", order=20
)
def run(context: StageContext) -> None:
    """Execute the scoring pipeline."""

    logger.info(
        "Starting scoring with database %s and config %s",
        context.settings.sqlite_path,
        context.settings.scoring_config,
    )
    try:
        summary = run_pipeline(
            sqlite_path=context.settings.sqlite_path,
            config_path=context.settings.scoring_config,
            as_of=context.as_of,
        )
    except FileNotFoundError as exc:
        logger.error("Scoring configuration missing: %s", exc)
        raise
    logger.info(
        "Scoring summary: %d supplier(s) evaluated, %d approved, %d pending, %d rejected",
        summary.suppliers_evaluated,
        summary.approved,
        summary.pending,
        summary.rejected,
    )
