"""Dataclasses shared by the scorers, the engine and the repositories."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

APPROVED = "approved"
PENDING = "pending"
REJECTED = "rejected"
RECOMMENDATIONS = (APPROVED, PENDING, REJECTED)

REGISTRATION_TYPES = ("PLC", "Ltd", "LP", "other")


@dataclass(slots=True)
class Supplier:
    """Company identity and the static attributes used for qualification."""

    supplier_id: str
    company_name: str
    registration_type: str
    vat_registered: bool
    years_of_operation: int
    business_type: str = ""
    status: str = PENDING
    tax_id: str = ""
    established_date: Optional[date] = None
    address: str = ""
    contact_person: str = ""


@dataclass(slots=True)
class FinancialStatement:
    """One fiscal year of financial data for a supplier."""

    supplier_id: str
    year: int
    sales_revenue: Decimal
    cost_of_goods_sold: Decimal
    gross_profit: Decimal
    net_income: Decimal
    total_assets: Decimal
    total_debt: Decimal
    total_equity: Decimal
    current_assets: Decimal
    current_liabilities: Decimal
    interest_expense: Decimal


@dataclass(slots=True)
class Transaction:
    """Purchase order to receipt lifecycle of one commercial transaction."""

    supplier_id: str
    buyer_name: str
    payment_term_days: int
    net_amount: Decimal
    transaction_id: Optional[str] = None
    po_date: Optional[date] = None
    delivery_date: Optional[date] = None
    invoice_date: Optional[date] = None
    payment_date: Optional[date] = None
    receipt_date: Optional[date] = None

    @property
    def activity_date(self) -> Optional[date]:
        """Most advanced date of the lifecycle: payment, invoice, then PO."""

        return self.payment_date or self.invoice_date or self.po_date


@dataclass(slots=True)
class Document:
    """Checklist document tracked for a supplier."""

    supplier_id: str
    document_type: str
    is_submitted: bool = False
    submitted_date: Optional[date] = None
    is_verified: bool = False
    document_name: str = ""


@dataclass(slots=True)
class Score:
    """Persisted credit score, one per supplier."""

    supplier_id: str
    financial_score: int
    financial_grade: str
    transactional_score: int
    a_score: int
    overall_credit_score: int
    recommendation: str
    last_updated: date

    def to_dict(self) -> Dict[str, object]:
        return {
            "supplierId": self.supplier_id,
            "financialScore": self.financial_score,
            "financialGrade": self.financial_grade,
            "transactionalScore": self.transactional_score,
            "aScore": self.a_score,
            "overallCreditScore": self.overall_credit_score,
            "recommendation": self.recommendation,
            "lastUpdated": self.last_updated.isoformat(),
        }


@dataclass(slots=True)
class CriterionResult:
    """Outcome of a single financial rubric criterion."""

    key: str
    label: str
    value: str
    passed: bool
    points: int


@dataclass(slots=True)
class FinancialAssessment:
    score: int
    grade: str
    year: Optional[int] = None
    criteria: List[CriterionResult] = field(default_factory=list)
    ratios: Dict[str, Optional[float]] = field(default_factory=dict)


@dataclass(slots=True)
class TransactionalAssessment:
    score: int
    transaction_count: int
    average_payment_term: Optional[float]
    adjustments: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class RFMProjection:
    """Display-only recency/frequency/monetary view of transaction history."""

    recency: int
    frequency: int
    monetary: int
    score: int
    total_value: Decimal = Decimal("0")
    days_since_latest: Optional[int] = None


@dataclass(slots=True)
class DocumentAssessment:
    submitted: int
    total: int
    score: int
    missing: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ScoreAssessment:
    """Everything the composite engine derived for one supplier."""

    supplier_id: str
    financial: FinancialAssessment
    transactional: TransactionalAssessment
    documents: DocumentAssessment
    overall_credit_score: int
    recommendation: str


@dataclass(slots=True)
class PricingTerms:
    """Indicative factoring terms derived from a score; never persisted."""

    advance_rate: str
    service_fee: str
    credit_limit: int
    credit_limit_range: str
    interest_rate: float

    def to_dict(self) -> Dict[str, object]:
        return {
            "advanceRate": self.advance_rate,
            "serviceFee": self.service_fee,
            "creditLimit": self.credit_limit,
            "creditLimitRange": self.credit_limit_range,
            "interestRate": self.interest_rate,
        }


__all__ = [
    "APPROVED",
    "PENDING",
    "REJECTED",
    "RECOMMENDATIONS",
    "REGISTRATION_TYPES",
    "Supplier",
    "FinancialStatement",
    "Transaction",
    "Document",
    "Score",
    "CriterionResult",
    "FinancialAssessment",
    "TransactionalAssessment",
    "RFMProjection",
    "DocumentAssessment",
    "ScoreAssessment",
    "PricingTerms",
]
