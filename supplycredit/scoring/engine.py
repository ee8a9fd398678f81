"""Composite credit scoring: sub-scores, overall score and recommendation."""
from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from .config import RecommendationRules, ScoringConfig
from .documents import DocumentScorer
from .financial import FinancialScorer
from .models import (
    APPROVED,
    PENDING,
    REJECTED,
    Document,
    FinancialStatement,
    Score,
    ScoreAssessment,
    Supplier,
    Transaction,
)
from .numbers import half_up
from .transactional import TransactionalScorer

logger = logging.getLogger(__name__)


def overall_credit_score(financial: int, transactional: int, a_score: int) -> int:
    """Equal-weight mean of the three sub-scores, rounded half up."""

    return int(half_up((financial + transactional + a_score) / 3))


def determine_recommendation(
    financial_score: int, a_score: int, rules: RecommendationRules | None = None
) -> str:
    rules = rules or RecommendationRules()
    if a_score >= rules.approve_min_a_score and financial_score >= rules.approve_min_financial:
        return APPROVED
    if a_score >= rules.pending_min_a_score and financial_score >= rules.pending_min_financial:
        return PENDING
    return REJECTED


class CreditScoringEngine:
    """Run the three scorers and combine their results."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig.default()
        self.financial = FinancialScorer(self.config)
        self.transactional = TransactionalScorer(self.config)
        self.documents = DocumentScorer(self.config)

    def assess(
        self,
        supplier: Supplier,
        statements: Sequence[FinancialStatement],
        transactions: Sequence[Transaction],
        documents: Sequence[Document],
    ) -> ScoreAssessment:
        financial = self.financial.score(supplier, statements)
        transactional = self.transactional.score(transactions)
        document_result = self.documents.score(documents)
        overall = overall_credit_score(
            financial.score, transactional.score, document_result.score
        )
        recommendation = determine_recommendation(
            financial.score, document_result.score, self.config.recommendation
        )
        logger.debug(
            "Supplier %s scored F=%d T=%d A=%d overall=%d (%s)",
            supplier.supplier_id,
            financial.score,
            transactional.score,
            document_result.score,
            overall,
            recommendation,
        )
        return ScoreAssessment(
            supplier_id=supplier.supplier_id,
            financial=financial,
            transactional=transactional,
            documents=document_result,
            overall_credit_score=overall,
            recommendation=recommendation,
        )

    @staticmethod
    def build_score(assessment: ScoreAssessment, as_of: date) -> Score:
        return Score(
            supplier_id=assessment.supplier_id,
            financial_score=assessment.financial.score,
            financial_grade=assessment.financial.grade,
            transactional_score=assessment.transactional.score,
            a_score=assessment.documents.score,
            overall_credit_score=assessment.overall_credit_score,
            recommendation=assessment.recommendation,
            last_updated=as_of,
        )


__all__ = ["CreditScoringEngine", "determine_recommendation", "overall_credit_score"]
