"""Score computation, manual overrides and on-demand reads for one supplier."""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Dict, Optional, Tuple

from .config import ScoringConfig
from .engine import CreditScoringEngine
from .models import (
    RECOMMENDATIONS,
    PricingTerms,
    RFMProjection,
    Score,
    ScoreAssessment,
    Supplier,
)
from .pricing import derive_pricing
from .report import CreditReport, build_report
from .repository import ScoreNotFoundError, SupplierNotFoundError, SupplierRepository

logger = logging.getLogger(__name__)


class ScoringService:
    """Coordinate repository reads, the engine and the score upsert.

    Recomputation always rebuilds every field from source records, so a manual
    recommendation override lasts only until the next :meth:`compute_score`.
    The supplier status is different: it records the last operator decision,
    is written only by :meth:`override_recommendation` and survives recompute.
    """

    def __init__(
        self,
        repository: SupplierRepository,
        engine: Optional[CreditScoringEngine] = None,
    ) -> None:
        self.repository = repository
        self.engine = engine or CreditScoringEngine()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def config(self) -> ScoringConfig:
        return self.engine.config

    def _lock_for(self, supplier_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(supplier_id, threading.Lock())

    def assess(self, supplier_id: str) -> ScoreAssessment:
        """Run the engine on current source data without persisting anything."""

        supplier = self.repository.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(f"Supplier '{supplier_id}' not found")
        return self.engine.assess(
            supplier,
            self.repository.get_financial_data(supplier_id),
            self.repository.get_transactions(supplier_id),
            self.repository.get_documents(supplier_id),
        )

    def compute_score(self, supplier_id: str, as_of: Optional[date] = None) -> Score:
        """Recompute and upsert the score for *supplier_id*."""

        with self._lock_for(supplier_id):
            assessment = self.assess(supplier_id)
            score = self.engine.build_score(assessment, as_of or date.today())
            if self.repository.get_score(supplier_id) is None:
                stored = self.repository.create_score(score)
                logger.info("Created score for supplier %s", supplier_id)
            else:
                stored = self.repository.update_score(supplier_id, score)
                logger.info("Updated score for supplier %s", supplier_id)
        logger.info(
            "Supplier %s overall=%d grade=%s recommendation=%s",
            supplier_id,
            stored.overall_credit_score,
            stored.financial_grade,
            stored.recommendation,
        )
        return stored

    def override_recommendation(self, supplier_id: str, recommendation: str) -> Score:
        """Set the recommendation by hand, leaving every sub-score untouched.

        The decision is also stored as the supplier status, which a later
        recompute does not reset.
        """

        if recommendation not in RECOMMENDATIONS:
            raise ValueError(
                f"Unknown recommendation '{recommendation}'; expected one of {RECOMMENDATIONS}"
            )
        with self._lock_for(supplier_id):
            current = self.repository.get_score(supplier_id)
            if current is None:
                raise ScoreNotFoundError(f"No score stored for supplier '{supplier_id}'")
            current.recommendation = recommendation
            stored = self.repository.update_score(supplier_id, current)
            self.repository.update_supplier_status(supplier_id, recommendation)
        logger.info("Recommendation for supplier %s overridden to %s", supplier_id, recommendation)
        return stored

    def _stored(self, supplier_id: str) -> Tuple[Supplier, Score]:
        supplier = self.repository.get_supplier(supplier_id)
        if supplier is None:
            raise SupplierNotFoundError(f"Supplier '{supplier_id}' not found")
        score = self.repository.get_score(supplier_id)
        if score is None:
            raise ScoreNotFoundError(f"No score stored for supplier '{supplier_id}'")
        return supplier, score

    def pricing_for(self, supplier_id: str) -> PricingTerms:
        supplier, score = self._stored(supplier_id)
        return derive_pricing(
            score, supplier.years_of_operation, supplier.vat_registered, self.config
        )

    def report_for(self, supplier_id: str) -> CreditReport:
        supplier, score = self._stored(supplier_id)
        return build_report(supplier, score, self.config)

    def rfm_for(self, supplier_id: str, today: Optional[date] = None) -> RFMProjection:
        """Read-only recency/frequency/monetary view of the transaction history."""

        if self.repository.get_supplier(supplier_id) is None:
            raise SupplierNotFoundError(f"Supplier '{supplier_id}' not found")
        return self.engine.transactional.rfm_projection(
            self.repository.get_transactions(supplier_id), today or date.today()
        )


__all__ = ["ScoringService"]
