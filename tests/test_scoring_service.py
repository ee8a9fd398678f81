from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date

import pytest

from conftest import make_statement, make_supplier
from supplycredit.scoring.report import portfolio_summary
from supplycredit.scoring.repository import ScoreNotFoundError, SupplierNotFoundError
from supplycredit.scoring.service import ScoringService


def test_unknown_supplier_raises_without_writing(repository) -> None:
    service = ScoringService(repository)

    with pytest.raises(SupplierNotFoundError):
        service.compute_score("MISSING")
    assert repository.get_score("MISSING") is None


def test_compute_score_creates_then_updates(repository) -> None:
    service = ScoringService(repository)

    first = service.compute_score("SUP001", as_of=date(2024, 1, 1))
    second = service.compute_score("SUP001", as_of=date(2024, 2, 1))

    assert first.overall_credit_score == 100
    assert first.recommendation == "approved"
    assert replace(second, last_updated=first.last_updated) == first
    assert repository.get_score("SUP001").last_updated == date(2024, 2, 1)


def test_recompute_reflects_changed_source_data(repository) -> None:
    service = ScoringService(repository)
    service.compute_score("SUP001", as_of=date(2024, 1, 1))

    repository.add_financial_statement(make_statement(year=2024, net_income=-5, total_equity=0))
    score = service.compute_score("SUP001", as_of=date(2024, 1, 2))

    assert score.financial_score == 60
    assert score.financial_grade == "D+"
    assert score.recommendation == "pending"


def test_override_changes_only_recommendation(repository) -> None:
    service = ScoringService(repository)
    computed = service.compute_score("SUP001", as_of=date(2024, 1, 1))

    overridden = service.override_recommendation("SUP001", "rejected")

    assert overridden.recommendation == "rejected"
    assert replace(overridden, recommendation=computed.recommendation) == computed
    assert repository.get_supplier("SUP001").status == "rejected"


def test_recompute_wins_over_manual_override(repository) -> None:
    service = ScoringService(repository)
    service.compute_score("SUP001", as_of=date(2024, 1, 1))
    service.override_recommendation("SUP001", "rejected")

    assert service.compute_score("SUP001", as_of=date(2024, 1, 2)).recommendation == "approved"


def test_operator_decision_survives_recompute(repository) -> None:
    service = ScoringService(repository)
    service.compute_score("SUP001", as_of=date(2024, 1, 1))
    service.override_recommendation("SUP001", "rejected")

    service.compute_score("SUP001", as_of=date(2024, 1, 2))

    assert repository.get_supplier("SUP001").status == "rejected"
    assert portfolio_summary(repository.list_suppliers())["rejected"] == 1


def test_override_requires_existing_score_and_valid_value(repository) -> None:
    service = ScoringService(repository)

    with pytest.raises(ScoreNotFoundError):
        service.override_recommendation("SUP001", "approved")
    service.compute_score("SUP001")
    with pytest.raises(ValueError):
        service.override_recommendation("SUP001", "maybe")


def test_concurrent_recomputation_serialises_upserts(repository) -> None:
    service = ScoringService(repository)

    with ThreadPoolExecutor(max_workers=8) as pool:
        scores = list(pool.map(lambda _: service.compute_score("SUP001"), range(16)))

    assert len({score.overall_credit_score for score in scores}) == 1
    assert repository.get_score("SUP001") is not None


def test_pricing_and_report_read_persisted_score(repository) -> None:
    service = ScoringService(repository)

    with pytest.raises(ScoreNotFoundError):
        service.pricing_for("SUP001")

    service.compute_score("SUP001", as_of=date(2024, 1, 1))
    pricing = service.pricing_for("SUP001")
    report = service.report_for("SUP001")

    assert pricing.advance_rate == "85–90%"
    assert report.pricing == pricing
    assert report.standing == "Excellent Credit Standing"


def test_assess_without_persisting(repository) -> None:
    repository.add_supplier(make_supplier("SUP002", registration_type="other"))
    service = ScoringService(repository)

    assessment = service.assess("SUP002")

    assert assessment.financial.score == 0
    assert repository.get_score("SUP002") is None


def test_rfm_projection_is_read_only(repository) -> None:
    service = ScoringService(repository)

    projection = service.rfm_for("SUP001", today=date(2024, 1, 1))

    assert projection.days_since_latest == 31
    assert (projection.recency, projection.frequency, projection.monetary) == (4, 4, 3)
    assert projection.score == 73
    assert repository.get_score("SUP001") is None
    with pytest.raises(SupplierNotFoundError):
        service.rfm_for("MISSING")
