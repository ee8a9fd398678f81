"""Human-readable credit report assembled from a persisted score."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .config import ScoringConfig
from .models import APPROVED, PENDING, REJECTED, PricingTerms, Score, Supplier
from .pricing import derive_pricing

HEADLINES = {
    APPROVED: "Recommended for Approval",
    PENDING: "Conditional Approval",
    REJECTED: "Not Recommended",
}

NEXT_STEPS = {
    APPROVED: [
        "Proceed with supplier onboarding",
        "Set appropriate credit limits",
        "Schedule regular performance reviews",
    ],
    PENDING: [
        "Request completion of remaining documents",
        "Verify financial statements with auditor confirmation",
        "Review payment history with other buyers",
        "Set conditional credit limit based on improvements",
    ],
    REJECTED: [
        "Request updated financial statements",
        "Require business improvement plan",
        "Consider re-evaluation in 6-12 months",
        "Recommend alternative financing options",
    ],
}


def credit_standing(overall: int) -> str:
    if overall >= 85:
        return "Excellent Credit Standing"
    if overall >= 75:
        return "Good Credit Standing"
    if overall >= 65:
        return "Fair Credit Standing"
    if overall >= 55:
        return "Poor Credit Standing"
    return "Very Poor Credit Standing"


@dataclass(slots=True)
class CreditReport:
    supplier_id: str
    company_name: str
    score: Score
    standing: str
    headline: str
    pricing: PricingTerms
    strengths: List[str] = field(default_factory=list)
    concerns: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "supplierId": self.supplier_id,
            "companyName": self.company_name,
            "score": self.score.to_dict(),
            "standing": self.standing,
            "headline": self.headline,
            "pricing": self.pricing.to_dict(),
            "strengths": list(self.strengths),
            "concerns": list(self.concerns),
            "nextSteps": list(self.next_steps),
        }


def _strengths(supplier: Supplier, score: Score) -> List[str]:
    strengths = []
    if score.financial_score >= 70:
        strengths.append(f"Strong financial performance ({score.financial_grade} grade)")
    if supplier.vat_registered:
        strengths.append("VAT registered and established entity")
    if supplier.years_of_operation >= 2:
        strengths.append(
            f"Established business ({supplier.years_of_operation} years of operation)"
        )
    if score.transactional_score >= 70:
        strengths.append("Good transaction history")
    return strengths


def _concerns(score: Score) -> List[str]:
    concerns = []
    if score.a_score < 80:
        concerns.append(f"Incomplete documentation ({score.a_score}% complete)")
    if score.financial_score < 70:
        concerns.append("Below minimum financial requirements")
    if score.transactional_score < 60:
        concerns.append("Limited transaction history")
    return concerns


def build_report(supplier: Supplier, score: Score, config: ScoringConfig | None = None) -> CreditReport:
    return CreditReport(
        supplier_id=supplier.supplier_id,
        company_name=supplier.company_name,
        score=score,
        standing=credit_standing(score.overall_credit_score),
        headline=HEADLINES.get(score.recommendation, "Under Review"),
        pricing=derive_pricing(
            score, supplier.years_of_operation, supplier.vat_registered, config
        ),
        strengths=_strengths(supplier, score),
        concerns=_concerns(score),
        next_steps=list(NEXT_STEPS.get(score.recommendation, [])),
    )


def portfolio_summary(suppliers: Iterable[Supplier]) -> Dict[str, int]:
    """Count suppliers per status, always reporting the three decisions.

    Status is the operator decision, so these counts can differ from the
    computed recommendations on the scores after a recompute.
    """

    counts = Counter(supplier.status for supplier in suppliers)
    summary = {status: counts.get(status, 0) for status in (APPROVED, PENDING, REJECTED)}
    summary["total"] = sum(counts.values())
    return summary


__all__ = ["CreditReport", "build_report", "credit_standing", "portfolio_summary"]
