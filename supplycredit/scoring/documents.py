"""Document completeness scoring (A-Score)."""
from __future__ import annotations

from typing import Sequence

from .config import ScoringConfig
from .models import Document, DocumentAssessment
from .numbers import half_up

REQUIRED_DOCUMENTS = (
    "Company Profile",
    "Owner/Key Executive History",
    "Company Certificate (Issued within the last month)",
    "Articles of Association",
    "Copy of Shareholders List (Latest)",
    "Partnership Registration Certificate",
    "Por Por 20 (VAT Registration)",
    "Factory License (Bor Chor 3 / Factory Establishment Permit)",
    "Internal Financial Statements and Por Por 30 with receipts",
    "3-Year Financial Statements (Latest)",
    "Bank Statements for the past 1 year",
    "Copy of ID Cards and House Registration of Directors and Spouses",
    "List of Debtors for Credit Limit Approval",
    "1-Year Collection History from Trade Debtors",
    "Purchase Orders or Contracts from Debtors",
    "Sales Forecast for Debtors Requesting Credit Approval",
    "Credit Bureau Reports (Company + Directors + Guarantors)",
    "Billing and Payment Terms",
)


class DocumentScorer:
    """Share of checklist documents a supplier has submitted."""

    def __init__(self, config: ScoringConfig, checklist: Sequence[str] = REQUIRED_DOCUMENTS) -> None:
        self.checklist_size = config.documents.checklist_size
        self.checklist = tuple(checklist)

    def score(self, documents: Sequence[Document]) -> DocumentAssessment:
        # The denominator is the number of records on file; an empty file
        # falls back to the full checklist so the score is 0, not undefined.
        total = len(documents) or self.checklist_size
        submitted = sum(1 for document in documents if document.is_submitted)
        submitted_types = {doc.document_type for doc in documents if doc.is_submitted}
        return DocumentAssessment(
            submitted=submitted,
            total=total,
            score=int(half_up(submitted / total * 100)),
            missing=[name for name in self.checklist if name not in submitted_types],
        )


__all__ = ["DocumentScorer", "REQUIRED_DOCUMENTS"]
