from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import make_statement, make_supplier
from supplycredit.scoring.config import ScoringConfig
from supplycredit.scoring.financial import FinancialScorer, latest_statement, safe_ratio


@pytest.fixture
def scorer() -> FinancialScorer:
    return FinancialScorer(ScoringConfig.default())


def test_qualified_supplier_passes_every_criterion(scorer) -> None:
    result = scorer.score(make_supplier(), [make_statement()])

    assert result.score == 100
    assert result.grade == "AAA"
    assert result.year == 2023
    assert [item.points for item in result.criteria] == [10, 10, 10, 15, 15, 15, 15, 10]
    assert all(item.passed for item in result.criteria)
    assert result.ratios["debt_to_equity"] == pytest.approx(20 / 15)
    assert result.ratios["interest_coverage"] == pytest.approx(9.0)


def test_missing_statements_default_to_zero_and_f(scorer) -> None:
    result = scorer.score(make_supplier(), [])

    assert result.score == 0
    assert result.grade == "F"
    assert result.criteria == []


def test_zero_equity_fails_leverage_without_raising(scorer) -> None:
    result = scorer.score(make_supplier(), [make_statement(total_equity=0)])
    leverage = next(item for item in result.criteria if item.key == "leverage")

    assert leverage.passed is False
    assert leverage.value == "n/a"
    assert result.ratios["debt_to_equity"] is None
    assert result.score == 85


def test_zero_current_liabilities_fails_liquidity(scorer) -> None:
    result = scorer.score(make_supplier(), [make_statement(current_liabilities=0)])
    liquidity = next(item for item in result.criteria if item.key == "liquidity")

    assert liquidity.passed is False
    assert result.score == 85


def test_zero_interest_expense_uses_coverage_sentinel(scorer) -> None:
    result = scorer.score(make_supplier(), [make_statement(interest_expense=0)])
    coverage = next(item for item in result.criteria if item.key == "interest_coverage")

    assert coverage.passed is True
    assert result.ratios["interest_coverage"] == 999.0


def test_only_latest_year_is_scored(scorer) -> None:
    statements = [
        make_statement(year=2023, net_income=-1),
        make_statement(year=2021),
    ]
    result = scorer.score(make_supplier(), statements)

    assert result.year == 2023
    assert next(item for item in result.criteria if item.key == "profitability").passed is False
    assert result.score == 75


def test_revenue_threshold_is_strict(scorer) -> None:
    result = scorer.score(make_supplier(), [make_statement(sales_revenue=30000000)])
    assert next(item for item in result.criteria if item.key == "revenue").passed is False


def test_supplier_attributes_drive_entity_criteria(scorer) -> None:
    supplier = make_supplier(registration_type="other", vat_registered=False, years_of_operation=1)
    result = scorer.score(supplier, [make_statement()])

    assert result.score == 70
    assert result.grade == "C+"


def test_limited_partnership_qualifies(scorer) -> None:
    result = scorer.score(make_supplier(registration_type="LP"), [make_statement()])
    assert result.criteria[0].passed is True


@pytest.mark.parametrize(
    ("score", "grade"),
    [
        (100, "AAA"),
        (95, "AAA"),
        (94, "AA"),
        (85, "A"),
        (80, "B+"),
        (75, "B"),
        (70, "C+"),
        (65, "C"),
        (60, "D+"),
        (59, "F"),
        (0, "F"),
    ],
)
def test_grade_table(scorer, score, grade) -> None:
    assert scorer.grade(score) == grade


def test_d_grade_is_unreachable(scorer) -> None:
    assert "D" not in {scorer.grade(value) for value in range(0, 101)}


def test_ratio_helpers() -> None:
    assert safe_ratio(Decimal("4"), Decimal("0")) is None
    assert safe_ratio(Decimal("4"), Decimal("2")) == Decimal("2")
    assert latest_statement([]) is None
