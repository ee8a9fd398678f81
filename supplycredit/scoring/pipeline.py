"""Batch recomputation of every supplier's score."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from .config import ScoringConfig, load_scoring_config
from .engine import CreditScoringEngine
from .models import Score
from .repository import SQLiteRepository, SupplierRepository
from .service import ScoringService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScoringSummary:
    """Counts reported by the scoring stage."""

    suppliers_evaluated: int
    approved: int
    pending: int
    rejected: int
    scores: List[Score] = field(default_factory=list)


def score_all(
    repository: SupplierRepository,
    *,
    config: Optional[ScoringConfig] = None,
    as_of: Optional[date] = None,
) -> ScoringSummary:
    """Recompute the score of every supplier held by *repository*."""

    service = ScoringService(repository, CreditScoringEngine(config))
    suppliers = repository.list_suppliers()
    if not suppliers:
        logger.warning("No suppliers available; skipping scoring.")
        return ScoringSummary(0, 0, 0, 0)

    scores = [service.compute_score(supplier.supplier_id, as_of) for supplier in suppliers]
    by_outcome = {outcome: 0 for outcome in ("approved", "pending", "rejected")}
    for score in scores:
        by_outcome[score.recommendation] += 1
    return ScoringSummary(
        suppliers_evaluated=len(scores),
        approved=by_outcome["approved"],
        pending=by_outcome["pending"],
        rejected=by_outcome["rejected"],
        scores=scores,
    )


def run_pipeline(*, sqlite_path: Path, config_path: Path, as_of: date) -> ScoringSummary:
    """Execute the scoring pipeline against the SQLite store."""

    config = load_scoring_config(config_path)
    return score_all(SQLiteRepository(sqlite_path), config=config, as_of=as_of)


__all__ = ["ScoringSummary", "run_pipeline", "score_all"]
