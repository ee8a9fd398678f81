from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from supplycredit.scoring.config import ScoringConfig, load_scoring_config

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "scoring.yaml"


def test_shipped_config_matches_built_in_defaults() -> None:
    assert load_scoring_config(REPO_CONFIG) == ScoringConfig.default()


def test_partial_file_overrides_only_named_keys(tmp_path) -> None:
    path = tmp_path / "scoring.yaml"
    path.write_text(
        "financial:\n"
        "  min_revenue: 50000000\n"
        "  points:\n"
        "    revenue: 20\n"
        "recommendation:\n"
        "  approve_min_a_score: 90\n",
        encoding="utf-8",
    )
    config = load_scoring_config(path)

    assert config.financial.min_revenue == Decimal("50000000")
    assert config.financial.points["revenue"] == 20
    assert config.financial.points["leverage"] == 15
    assert config.recommendation.approve_min_a_score == 90
    assert config.recommendation.pending_min_a_score == 31
    assert config.pricing == ScoringConfig.default().pricing


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scoring_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "- not\n- a mapping\n",
        "financial:\n  points:\n    goodwill: 5\n",
        "pricing:\n  base_limit: [1, 2]\n",
        "transactional:\n  volume_bonuses:\n    - {count: 5}\n",
        "financial:\n  points: 5\n",
        "transactional:\n  rfm: 5\n",
        "pricing:\n  grade_factors: [1.2, 1.1]\n",
    ],
)
def test_malformed_values_raise_value_error(tmp_path, content) -> None:
    path = tmp_path / "scoring.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_scoring_config(path)
