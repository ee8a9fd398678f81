"""Financial statement scoring (F-Score)."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from .config import FinancialRules, ScoringConfig
from .models import CriterionResult, FinancialAssessment, FinancialStatement, Supplier

logger = logging.getLogger(__name__)


def latest_statement(statements: Iterable[FinancialStatement]) -> Optional[FinancialStatement]:
    """Return the statement with the highest fiscal year, if any."""

    return max(statements, key=lambda statement: statement.year, default=None)


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Optional[Decimal]:
    """Divide, returning ``None`` when the ratio is undefined."""

    if denominator == 0:
        return None
    return numerator / denominator


def _format_ratio(ratio: Optional[Decimal]) -> str:
    return "n/a" if ratio is None else f"{float(ratio):.1f}x"


class FinancialScorer:
    """Apply the additive qualification rubric to a supplier's latest statement."""

    def __init__(self, config: ScoringConfig) -> None:
        self.rules: FinancialRules = config.financial

    def score(
        self, supplier: Supplier, statements: Iterable[FinancialStatement]
    ) -> FinancialAssessment:
        latest = latest_statement(statements)
        if latest is None:
            logger.info(
                "No financial statements for supplier %s; financial score defaults to 0",
                supplier.supplier_id,
            )
            return FinancialAssessment(score=0, grade=self.grade(0))

        criteria = self._evaluate(supplier, latest)
        total = min(self.rules.max_score, sum(item.points for item in criteria))
        debt_to_equity = safe_ratio(latest.total_debt, latest.total_equity)
        current_ratio = safe_ratio(latest.current_assets, latest.current_liabilities)
        return FinancialAssessment(
            score=total,
            grade=self.grade(total),
            year=latest.year,
            criteria=criteria,
            ratios={
                "debt_to_equity": None if debt_to_equity is None else float(debt_to_equity),
                "current_ratio": None if current_ratio is None else float(current_ratio),
                "interest_coverage": float(self._interest_coverage(latest)),
            },
        )

    def grade(self, score: int) -> str:
        return self.rules.grades.lookup(score)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _interest_coverage(self, statement: FinancialStatement) -> Decimal:
        if statement.interest_expense > 0:
            return statement.net_income / statement.interest_expense
        return Decimal(str(self.rules.interest_coverage_sentinel))

    def _evaluate(
        self, supplier: Supplier, statement: FinancialStatement
    ) -> List[CriterionResult]:
        rules = self.rules
        debt_to_equity = safe_ratio(statement.total_debt, statement.total_equity)
        current_ratio = safe_ratio(statement.current_assets, statement.current_liabilities)
        coverage = self._interest_coverage(statement)
        if debt_to_equity is None or current_ratio is None:
            logger.warning(
                "Undefined ratio for supplier %s in %s (equity=%s, current liabilities=%s)",
                supplier.supplier_id,
                statement.year,
                statement.total_equity,
                statement.current_liabilities,
            )

        checks = [
            (
                "entity_type",
                "Entity Type",
                supplier.registration_type,
                supplier.registration_type in rules.qualifying_registration_types,
            ),
            (
                "vat_registration",
                "VAT Registration",
                "Registered" if supplier.vat_registered else "Not Registered",
                supplier.vat_registered,
            ),
            (
                "years_of_operation",
                "Years of Operation",
                f"{supplier.years_of_operation} years",
                supplier.years_of_operation >= rules.min_years_of_operation,
            ),
            (
                "revenue",
                "Sales Revenue",
                f"{float(statement.sales_revenue) / 1_000_000:.1f}M",
                statement.sales_revenue > rules.min_revenue,
            ),
            (
                "profitability",
                "Profitability",
                "Profitable" if statement.net_income > 0 else "Loss",
                statement.net_income > 0,
            ),
            (
                "leverage",
                "D/E Ratio",
                _format_ratio(debt_to_equity),
                debt_to_equity is not None
                and debt_to_equity <= Decimal(str(rules.max_debt_to_equity)),
            ),
            (
                "liquidity",
                "Current Ratio",
                _format_ratio(current_ratio),
                current_ratio is not None
                and current_ratio > Decimal(str(rules.min_current_ratio)),
            ),
            (
                "interest_coverage",
                "Interest Coverage",
                _format_ratio(coverage),
                coverage > Decimal(str(rules.min_interest_coverage)),
            ),
        ]
        return [
            CriterionResult(
                key=key,
                label=label,
                value=value,
                passed=bool(passed),
                points=rules.points[key] if passed else 0,
            )
            for key, label, value, passed in checks
        ]


__all__ = ["FinancialScorer", "latest_statement", "safe_ratio"]
