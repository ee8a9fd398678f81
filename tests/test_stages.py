from __future__ import annotations

import csv
from datetime import date

import pytest
from openpyxl import load_workbook

from conftest import make_documents, make_statement, make_supplier, make_transactions
from supplycredit.export import run as run_export
from supplycredit.scoring import run as run_scoring
from supplycredit.scoring.repository import SQLiteRepository


@pytest.fixture
def seeded_store(stage_context) -> SQLiteRepository:
    repository = SQLiteRepository(stage_context.settings.sqlite_path)
    repository.add_suppliers(
        [make_supplier(), make_supplier("SUP002", registration_type="other", years_of_operation=1)]
    )
    repository.add_financial_statements([make_statement()])
    repository.add_transactions(make_transactions(10))
    repository.add_documents(make_documents(18))
    repository.add_documents(make_documents(3, total=10, supplier_id="SUP002"))
    return repository


def test_score_stage_persists_scores_dated_to_the_run(stage_context, seeded_store) -> None:
    run_scoring(stage_context)

    first = seeded_store.get_score("SUP001")
    second = seeded_store.get_score("SUP002")
    assert first.recommendation == "approved"
    assert first.last_updated == date(2024, 1, 1)
    assert (second.financial_score, second.transactional_score, second.a_score) == (0, 50, 30)
    assert second.recommendation == "rejected"


def test_score_stage_requires_config(stage_context, seeded_store, tmp_path) -> None:
    stage_context.settings.scoring_config = tmp_path / "missing.yaml"

    with pytest.raises(FileNotFoundError):
        run_scoring(stage_context)


def test_export_stage_writes_csv_and_workbook(stage_context, seeded_store) -> None:
    run_scoring(stage_context)
    run_export(stage_context)

    output_dir = stage_context.settings.output_dir
    with (output_dir / "credit_scores_test-run.csv").open(encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["supplier_id"] for row in rows] == ["SUP001", "SUP002"]
    assert rows[0]["standing"] == "Excellent Credit Standing"
    assert rows[0]["credit_limit_range"] == "88–98M"

    workbook = load_workbook(output_dir / "credit_report_test-run.xlsx")
    assert workbook.sheetnames == ["Scores", "Portfolio"]
    assert workbook["Scores"]["A2"].value == "SUP001"
    assert workbook["Portfolio"].max_row == 5


def test_export_skips_when_nothing_is_scored(stage_context, seeded_store) -> None:
    run_export(stage_context)

    assert not list(stage_context.settings.output_dir.iterdir())
