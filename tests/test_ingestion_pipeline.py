from __future__ import annotations

import pytest
from openpyxl import Workbook

from supplycredit.ingestion.manifest import ManifestError, load_manifest
from supplycredit.ingestion.pipeline import run_pipeline
from supplycredit.ingestion.storage import IngestionStore
from supplycredit.scoring.repository import SQLiteRepository

SUPPLIERS_CSV = (
    "supplier_id,company_name,registration_type,vat_registered,years_of_operation\n"
    "SUP001,Siam Packaging,Ltd,true,5\n"
    "SUP002,Korat Plastics,Corp,false,3\n"
    "SUP003,Lanna Foods,LP,yes,-2\n"
)

FINANCIALS_CSV = (
    "supplier_id,year,sales_revenue,cost_of_goods_sold,gross_profit,net_income,total_assets,"
    "total_debt,total_equity,current_assets,current_liabilities,interest_expense\n"
    "SUP001,2023,45000000,30000000,15000000,9000000,35000000,20000000,15000000,10000000,6000000,1000000\n"
    "SUP001,2022,not-a-number,30000000,15000000,9000000,35000000,20000000,15000000,10000000,6000000,1000000\n"
)


def _write_manifest(stage_context, sources: str) -> None:
    stage_context.settings.sources_manifest.write_text(f"sources:\n{sources}", encoding="utf-8")


def test_ingestion_pipeline_loads_valid_rows_and_logs_rejects(stage_context) -> None:
    data_dir = stage_context.settings.data_dir
    (data_dir / "suppliers.csv").write_text(SUPPLIERS_CSV, encoding="utf-8")
    (data_dir / "financials.csv").write_text(FINANCIALS_CSV, encoding="utf-8")
    _write_manifest(
        stage_context,
        "  - {id: financials, kind: financial_statements, path: financials.csv}\n"
        "  - {id: suppliers, kind: suppliers, path: suppliers.csv}\n",
    )

    entries = run_pipeline(stage_context)

    assert [entry.source_id for entry in entries] == ["suppliers", "financials"]
    suppliers, financials = entries
    assert (suppliers.record_count, suppliers.loaded_count, suppliers.rejected_count) == (3, 1, 2)
    assert suppliers.status == "partial"
    assert financials.loaded_count == 1
    assert financials.metadata["rejected"][0]["row"] == 3

    repository = SQLiteRepository(stage_context.settings.sqlite_path)
    assert [supplier.supplier_id for supplier in repository.list_suppliers()] == ["SUP001"]
    assert [statement.year for statement in repository.get_financial_data("SUP001")] == [2023]

    logged = IngestionStore(stage_context.settings.sqlite_path).entries_for_run("test-run")
    assert [(row["source_id"], row["status"]) for row in logged] == [
        ("suppliers", "partial"),
        ("financials", "partial"),
    ]
    assert logged[0]["rejected_count"] == 2


def test_rows_for_unknown_suppliers_are_rejected(stage_context) -> None:
    data_dir = stage_context.settings.data_dir
    (data_dir / "suppliers.csv").write_text(SUPPLIERS_CSV, encoding="utf-8")
    (data_dir / "documents.csv").write_text(
        "supplier_id,document_type,is_submitted\n"
        "SUP001,Company Profile,true\n"
        "SUP999,Company Profile,true\n",
        encoding="utf-8",
    )
    _write_manifest(
        stage_context,
        "  - {id: suppliers, kind: suppliers, path: suppliers.csv}\n"
        "  - {id: documents, kind: documents, path: documents.csv}\n",
    )

    documents = run_pipeline(stage_context)[1]

    assert documents.loaded_count == 1
    assert "Unknown supplier 'SUP999'" in documents.metadata["rejected"][0]["error"]


def test_reingesting_transactions_without_ids_keeps_one_copy(stage_context) -> None:
    data_dir = stage_context.settings.data_dir
    (data_dir / "suppliers.csv").write_text(SUPPLIERS_CSV, encoding="utf-8")
    (data_dir / "transactions.csv").write_text(
        "supplier_id,buyer_name,po_payment_term,po_net_amount,po_date\n"
        "SUP001,CP All,45,250000,2024-01-10\n"
        "SUP001,CP All,60,400000,2024-02-10\n"
        "SUP001,PTT Global,30,125000.50,2024-03-10\n",
        encoding="utf-8",
    )
    _write_manifest(
        stage_context,
        "  - {id: suppliers, kind: suppliers, path: suppliers.csv}\n"
        "  - {id: transactions, kind: transactions, path: transactions.csv}\n",
    )

    run_pipeline(stage_context)
    run_pipeline(stage_context)

    repository = SQLiteRepository(stage_context.settings.sqlite_path)
    transactions = repository.get_transactions("SUP001")
    assert len(transactions) == 3
    assert sorted(item.payment_term_days for item in transactions) == [30, 45, 60]


def test_missing_file_is_logged_as_failed(stage_context) -> None:
    _write_manifest(stage_context, "  - {id: suppliers, kind: suppliers, path: absent.csv}\n")

    entry = run_pipeline(stage_context)[0]

    assert entry.status == "failed"
    assert entry.loaded_count == 0
    assert entry.error


def test_xlsx_sources_are_supported(stage_context) -> None:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Suppliers"
    sheet.append(["supplier_id", "company_name", "registration_type", "vat_registered", "years_of_operation"])
    sheet.append(["SUP010", "Bangna Steel Works", "PLC", True, 14])
    sheet.append([None, None, None, None, None])
    workbook.save(stage_context.settings.data_dir / "suppliers.xlsx")
    _write_manifest(
        stage_context,
        "  - {id: suppliers, kind: suppliers, path: suppliers.xlsx, worksheet: Suppliers}\n",
    )

    entry = run_pipeline(stage_context)[0]

    assert entry.status == "success"
    supplier = SQLiteRepository(stage_context.settings.sqlite_path).get_supplier("SUP010")
    assert supplier.years_of_operation == 14
    assert supplier.vat_registered is True


def test_manifest_validation(tmp_path) -> None:
    with pytest.raises(ManifestError):
        load_manifest(tmp_path / "missing.yaml")

    path = tmp_path / "sources.yaml"
    path.write_text("sources:\n  - {id: x, kind: invoices, path: x.csv}\n", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)

    path.write_text("sources: []\n", encoding="utf-8")
    with pytest.raises(ManifestError):
        load_manifest(path)
