from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from supplycredit.core.stage import StageContext
from supplycredit.scoring.documents import REQUIRED_DOCUMENTS
from supplycredit.scoring.models import Document, FinancialStatement, Supplier, Transaction
from supplycredit.scoring.repository import InMemoryRepository
from supplycredit.settings import Settings

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def stage_context(tmp_path: Path) -> StageContext:
    """Create a temporary stage context for tests."""

    settings = Settings(
        data_dir=tmp_path / "data",
        output_dir=tmp_path / "artifacts",
        sqlite_path=tmp_path / "supplycredit.sqlite",
        scoring_config=REPO_ROOT / "config" / "scoring.yaml",
        sources_manifest=tmp_path / "sources.yaml",
        log_level="INFO",
    )
    settings.ensure_directories()
    return StageContext(
        settings=settings,
        run_id="test-run",
        timestamp=datetime(2024, 1, 1, 12, 0, 0),
        workspace=tmp_path,
    )


def make_supplier(supplier_id: str = "SUP001", **overrides) -> Supplier:
    values = dict(
        supplier_id=supplier_id,
        company_name="Siam Packaging",
        registration_type="Ltd",
        vat_registered=True,
        years_of_operation=5,
    )
    values.update(overrides)
    return Supplier(**values)


def make_statement(supplier_id: str = "SUP001", year: int = 2023, **overrides) -> FinancialStatement:
    values = dict(
        sales_revenue=Decimal("45000000"),
        cost_of_goods_sold=Decimal("30000000"),
        gross_profit=Decimal("15000000"),
        net_income=Decimal("9000000"),
        total_assets=Decimal("35000000"),
        total_debt=Decimal("20000000"),
        total_equity=Decimal("15000000"),
        current_assets=Decimal("10000000"),
        current_liabilities=Decimal("6000000"),
        interest_expense=Decimal("1000000"),
    )
    values.update({key: Decimal(str(value)) for key, value in overrides.items()})
    return FinancialStatement(supplier_id=supplier_id, year=year, **values)


def make_transactions(count: int, supplier_id: str = "SUP001", term: int = 60) -> list[Transaction]:
    return [
        Transaction(
            supplier_id=supplier_id,
            buyer_name="Central Retail",
            payment_term_days=term,
            net_amount=Decimal("1000000"),
            transaction_id=f"PO-{index:03d}",
            po_date=date(2023, 12, 1),
        )
        for index in range(count)
    ]


def make_documents(submitted: int, total: int = 18, supplier_id: str = "SUP001") -> list[Document]:
    return [
        Document(
            supplier_id=supplier_id,
            document_type=REQUIRED_DOCUMENTS[index % len(REQUIRED_DOCUMENTS)],
            is_submitted=index < submitted,
        )
        for index in range(total)
    ]


@pytest.fixture
def repository() -> InMemoryRepository:
    """In-memory store holding one fully qualified supplier."""

    store = InMemoryRepository()
    store.add_supplier(make_supplier())
    store.add_financial_statement(make_statement())
    for transaction in make_transactions(10):
        store.add_transaction(transaction)
    for document in make_documents(18):
        store.add_document(document)
    return store
