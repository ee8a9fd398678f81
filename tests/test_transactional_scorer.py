from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from conftest import make_transactions
from supplycredit.scoring.config import ScoringConfig
from supplycredit.scoring.models import Transaction
from supplycredit.scoring.transactional import TransactionalScorer


@pytest.fixture
def scorer() -> TransactionalScorer:
    return TransactionalScorer(ScoringConfig.default())


def test_no_transactions_keeps_neutral_base(scorer) -> None:
    result = scorer.score([])

    assert result.score == 50
    assert result.transaction_count == 0
    assert result.average_payment_term is None


@pytest.mark.parametrize(
    ("count", "expected"),
    [(1, 70), (4, 70), (5, 85), (9, 85), (10, 100), (25, 100)],
)
def test_volume_bonuses_are_cumulative(scorer, count, expected) -> None:
    assert scorer.score(make_transactions(count)).score == expected


def test_long_payment_terms_forfeit_term_points(scorer) -> None:
    result = scorer.score(make_transactions(10, term=181))

    assert result.score == 80
    assert "payment_term" not in result.adjustments


def test_average_term_at_limit_earns_points(scorer) -> None:
    transactions = make_transactions(1, term=120) + make_transactions(1, term=240)
    assert scorer.score(transactions).adjustments["payment_term"] == 20


def test_rfm_projection_for_empty_history(scorer) -> None:
    projection = scorer.rfm_projection([], date(2024, 1, 1))

    assert (projection.recency, projection.frequency, projection.monetary) == (3, 1, 1)
    assert projection.score == 50


def test_rfm_projection_rates_recent_high_value_history(scorer) -> None:
    today = date(2024, 1, 1)
    transactions = [
        Transaction(
            supplier_id="SUP001",
            buyer_name="CP All",
            payment_term_days=30,
            net_amount=Decimal("5000000"),
            po_date=today - timedelta(days=60 + index),
            payment_date=today - timedelta(days=10 + index) if index == 0 else None,
        )
        for index in range(12)
    ]
    projection = scorer.rfm_projection(transactions, today)

    assert projection.days_since_latest == 10
    assert projection.recency == 5
    assert projection.frequency == 4
    assert projection.monetary == 5
    assert projection.total_value == Decimal("60000000")
    assert projection.score == 93


def test_rfm_projection_stale_history(scorer) -> None:
    today = date(2024, 1, 1)
    transactions = [
        Transaction(
            supplier_id="SUP001",
            buyer_name="CP All",
            payment_term_days=30,
            net_amount=Decimal("100000"),
            po_date=today - timedelta(days=400),
        )
    ]
    projection = scorer.rfm_projection(transactions, today)

    assert (projection.recency, projection.frequency, projection.monetary) == (1, 1, 1)
    assert projection.score == 20
