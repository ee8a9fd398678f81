"""Credit score export stage."""
from __future__ import annotations

import logging

from supplycredit.core import register_stage
from supplycredit.core.stage import StageContext
from supplycredit.scoring.config import load_scoring_config

from .generators import ExportGenerator

logger = logging.getLogger(__name__)


@register_stage("export", "Write credit score CSV and Excel extracts.", order=30)
def run(context: StageContext) -> None:
    """Produce consolidated CSV/Excel files for the persisted scores."""

    settings = context.settings
    config = load_scoring_config(settings.scoring_config)
    generator = ExportGenerator(settings.sqlite_path, settings.output_dir, config)
    summary = generator.generate(context.run_id)
    if summary.score_rows == 0:
        logger.warning(
            "No scores available for export in run %s; skipping file generation.",
            context.run_id,
        )
        return
    logger.info("Exported %d supplier score(s) for run %s.", summary.score_rows, context.run_id)
    for artifact in summary.files:
        logger.info("Export artifact written to %s", artifact)
