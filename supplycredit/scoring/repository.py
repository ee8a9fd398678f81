"""Data access for the scoring engine.

The engine only depends on :class:`SupplierRepository`; the in-memory and
SQLite classes below are the two stores shipped with the package.
"""
from __future__ import annotations

import hashlib
import logging
import sqlite3
import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol

from .models import Document, FinancialStatement, Score, Supplier, Transaction

logger = logging.getLogger(__name__)


class SupplierNotFoundError(LookupError):
    """Raised when a supplier id is unknown to the repository."""


class ScoreNotFoundError(LookupError):
    """Raised when an operation needs a persisted score that does not exist."""


class SupplierRepository(Protocol):
    """Read access to supplier records plus upsert access to scores."""

    def list_suppliers(self) -> List[Supplier]: ...

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]: ...

    def get_financial_data(self, supplier_id: str) -> List[FinancialStatement]: ...

    def get_transactions(self, supplier_id: str) -> List[Transaction]: ...

    def get_documents(self, supplier_id: str) -> List[Document]: ...

    def get_score(self, supplier_id: str) -> Optional[Score]: ...

    def create_score(self, score: Score) -> Score: ...

    def update_score(self, supplier_id: str, score: Score) -> Score: ...

    def update_supplier_status(self, supplier_id: str, status: str) -> None: ...


class InMemoryRepository:
    """Dictionary backed repository used by tests and demos."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._suppliers: Dict[str, Supplier] = {}
        self._financials: Dict[str, Dict[int, FinancialStatement]] = {}
        self._transactions: Dict[str, List[Transaction]] = {}
        self._documents: Dict[str, List[Document]] = {}
        self._scores: Dict[str, Score] = {}

    def add_supplier(self, supplier: Supplier) -> None:
        with self._lock:
            self._suppliers[supplier.supplier_id] = supplier

    def add_financial_statement(self, statement: FinancialStatement) -> None:
        with self._lock:
            self._financials.setdefault(statement.supplier_id, {})[statement.year] = statement

    def add_transaction(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions.setdefault(transaction.supplier_id, []).append(transaction)

    def add_document(self, document: Document) -> None:
        with self._lock:
            self._documents.setdefault(document.supplier_id, []).append(document)

    def list_suppliers(self) -> List[Supplier]:
        return sorted(self._suppliers.values(), key=lambda item: item.supplier_id)

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        return self._suppliers.get(supplier_id)

    def get_financial_data(self, supplier_id: str) -> List[FinancialStatement]:
        return sorted(self._financials.get(supplier_id, {}).values(), key=lambda s: s.year)

    def get_transactions(self, supplier_id: str) -> List[Transaction]:
        return list(self._transactions.get(supplier_id, []))

    def get_documents(self, supplier_id: str) -> List[Document]:
        return list(self._documents.get(supplier_id, []))

    def get_score(self, supplier_id: str) -> Optional[Score]:
        score = self._scores.get(supplier_id)
        return replace(score) if score else None

    def create_score(self, score: Score) -> Score:
        with self._lock:
            self._scores[score.supplier_id] = replace(score)
        return score

    def update_score(self, supplier_id: str, score: Score) -> Score:
        with self._lock:
            if supplier_id not in self._scores:
                raise ScoreNotFoundError(f"No score stored for supplier '{supplier_id}'")
            self._scores[supplier_id] = replace(score, supplier_id=supplier_id)
        return self._scores[supplier_id]

    def update_supplier_status(self, supplier_id: str, status: str) -> None:
        with self._lock:
            supplier = self._suppliers.get(supplier_id)
            if supplier is None:
                raise SupplierNotFoundError(f"Supplier '{supplier_id}' not found")
            supplier.status = status


def _decimal(value: Optional[str]) -> Decimal:
    return Decimal(value) if value not in (None, "") else Decimal("0")


def _date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _transaction_reference(item: Transaction) -> str:
    """Return the stored reference, deriving a stable one for rows without an id.

    SQLite treats NULLs as distinct in the unique index, so unreferenced rows
    are keyed on their content to keep reloads idempotent.
    """

    if item.transaction_id:
        return item.transaction_id
    content = "|".join(
        (
            item.supplier_id,
            item.buyer_name,
            _iso(item.po_date) or "",
            str(item.payment_term_days),
            str(item.net_amount.normalize()),
        )
    )
    return "auto-" + hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]


_MONEY_COLUMNS = (
    "sales_revenue",
    "cost_of_goods_sold",
    "gross_profit",
    "net_income",
    "total_assets",
    "total_debt",
    "total_equity",
    "current_assets",
    "current_liabilities",
    "interest_expense",
)


class SQLiteRepository:
    """Repository persisted in SQLite; monetary values are stored as text."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self.path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        return connection

    def _ensure_schema(self) -> None:
        with self._connect() as connection:
            connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS suppliers (
                    supplier_id TEXT PRIMARY KEY,
                    company_name TEXT NOT NULL,
                    tax_id TEXT NOT NULL DEFAULT '',
                    registration_type TEXT NOT NULL,
                    vat_registered INTEGER NOT NULL DEFAULT 0,
                    business_type TEXT NOT NULL DEFAULT '',
                    established_date TEXT,
                    address TEXT NOT NULL DEFAULT '',
                    contact_person TEXT NOT NULL DEFAULT '',
                    years_of_operation INTEGER NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS financial_statements (
                    supplier_id TEXT NOT NULL REFERENCES suppliers(supplier_id),
                    year INTEGER NOT NULL,
                    sales_revenue TEXT NOT NULL,
                    cost_of_goods_sold TEXT NOT NULL,
                    gross_profit TEXT NOT NULL,
                    net_income TEXT NOT NULL,
                    total_assets TEXT NOT NULL,
                    total_debt TEXT NOT NULL,
                    total_equity TEXT NOT NULL,
                    current_assets TEXT NOT NULL,
                    current_liabilities TEXT NOT NULL,
                    interest_expense TEXT NOT NULL,
                    PRIMARY KEY (supplier_id, year)
                );

                CREATE TABLE IF NOT EXISTS transactions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    transaction_id TEXT,
                    supplier_id TEXT NOT NULL REFERENCES suppliers(supplier_id),
                    buyer_name TEXT NOT NULL,
                    payment_term_days INTEGER NOT NULL,
                    net_amount TEXT NOT NULL,
                    po_date TEXT,
                    delivery_date TEXT,
                    invoice_date TEXT,
                    payment_date TEXT,
                    receipt_date TEXT
                );

                CREATE TABLE IF NOT EXISTS documents (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    supplier_id TEXT NOT NULL REFERENCES suppliers(supplier_id),
                    document_type TEXT NOT NULL,
                    document_name TEXT NOT NULL DEFAULT '',
                    is_submitted INTEGER NOT NULL DEFAULT 0,
                    submitted_date TEXT,
                    is_verified INTEGER NOT NULL DEFAULT 0
                );

                CREATE TABLE IF NOT EXISTS scores (
                    supplier_id TEXT PRIMARY KEY REFERENCES suppliers(supplier_id),
                    financial_score INTEGER NOT NULL,
                    financial_grade TEXT NOT NULL,
                    transactional_score INTEGER NOT NULL,
                    a_score INTEGER NOT NULL,
                    overall_credit_score INTEGER NOT NULL,
                    recommendation TEXT NOT NULL,
                    last_updated TEXT NOT NULL
                );

                CREATE UNIQUE INDEX IF NOT EXISTS ux_transactions_reference
                    ON transactions(supplier_id, transaction_id);
                CREATE UNIQUE INDEX IF NOT EXISTS ux_documents_type
                    ON documents(supplier_id, document_type);
                """
            )

    # ------------------------------------------------------------------
    # Writers used by ingestion
    # ------------------------------------------------------------------

    def add_suppliers(self, suppliers: Iterable[Supplier]) -> int:
        entries = list(suppliers)
        with self._connect() as connection:
            for supplier in entries:
                connection.execute(
                    """
                    INSERT INTO suppliers (
                        supplier_id, company_name, tax_id, registration_type,
                        vat_registered, business_type, established_date, address,
                        contact_person, years_of_operation, status
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(supplier_id) DO UPDATE SET
                        company_name=excluded.company_name,
                        tax_id=excluded.tax_id,
                        registration_type=excluded.registration_type,
                        vat_registered=excluded.vat_registered,
                        business_type=excluded.business_type,
                        established_date=excluded.established_date,
                        address=excluded.address,
                        contact_person=excluded.contact_person,
                        years_of_operation=excluded.years_of_operation,
                        updated_at=CURRENT_TIMESTAMP
                    """,
                    (
                        supplier.supplier_id,
                        supplier.company_name,
                        supplier.tax_id,
                        supplier.registration_type,
                        int(supplier.vat_registered),
                        supplier.business_type,
                        _iso(supplier.established_date),
                        supplier.address,
                        supplier.contact_person,
                        supplier.years_of_operation,
                        supplier.status,
                    ),
                )
        return len(entries)

    def add_financial_statements(self, statements: Iterable[FinancialStatement]) -> int:
        entries = list(statements)
        columns = ", ".join(_MONEY_COLUMNS)
        updates = ", ".join(f"{name}=excluded.{name}" for name in _MONEY_COLUMNS)
        placeholders = ", ".join("?" for _ in range(len(_MONEY_COLUMNS) + 2))
        with self._connect() as connection:
            for statement in entries:
                connection.execute(
                    f"""
                    INSERT INTO financial_statements (supplier_id, year, {columns})
                    VALUES ({placeholders})
                    ON CONFLICT(supplier_id, year) DO UPDATE SET {updates}
                    """,
                    (
                        statement.supplier_id,
                        statement.year,
                        *(str(getattr(statement, name)) for name in _MONEY_COLUMNS),
                    ),
                )
        return len(entries)

    def add_transactions(self, transactions: Iterable[Transaction]) -> int:
        entries = list(transactions)
        with self._connect() as connection:
            connection.executemany(
                """
                INSERT INTO transactions (
                    transaction_id, supplier_id, buyer_name, payment_term_days,
                    net_amount, po_date, delivery_date, invoice_date, payment_date,
                    receipt_date
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(supplier_id, transaction_id) DO UPDATE SET
                    buyer_name=excluded.buyer_name,
                    payment_term_days=excluded.payment_term_days,
                    net_amount=excluded.net_amount,
                    po_date=excluded.po_date,
                    delivery_date=excluded.delivery_date,
                    invoice_date=excluded.invoice_date,
                    payment_date=excluded.payment_date,
                    receipt_date=excluded.receipt_date
                """,
                [
                    (
                        _transaction_reference(item),
                        item.supplier_id,
                        item.buyer_name,
                        item.payment_term_days,
                        str(item.net_amount),
                        _iso(item.po_date),
                        _iso(item.delivery_date),
                        _iso(item.invoice_date),
                        _iso(item.payment_date),
                        _iso(item.receipt_date),
                    )
                    for item in entries
                ],
            )
        return len(entries)

    def add_documents(self, documents: Iterable[Document]) -> int:
        entries = list(documents)
        with self._connect() as connection:
            connection.executemany(
                """
                INSERT INTO documents (
                    supplier_id, document_type, document_name, is_submitted,
                    submitted_date, is_verified
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(supplier_id, document_type) DO UPDATE SET
                    document_name=excluded.document_name,
                    is_submitted=excluded.is_submitted,
                    submitted_date=excluded.submitted_date,
                    is_verified=excluded.is_verified
                """,
                [
                    (
                        item.supplier_id,
                        item.document_type,
                        item.document_name,
                        int(item.is_submitted),
                        _iso(item.submitted_date),
                        int(item.is_verified),
                    )
                    for item in entries
                ],
            )
        return len(entries)

    # ------------------------------------------------------------------
    # SupplierRepository
    # ------------------------------------------------------------------

    def list_suppliers(self) -> List[Supplier]:
        with self._connect() as connection:
            rows = connection.execute("SELECT * FROM suppliers ORDER BY supplier_id").fetchall()
        return [self._supplier(row) for row in rows]

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT * FROM suppliers WHERE supplier_id=?", (supplier_id,)
            ).fetchone()
        return self._supplier(row) if row else None

    def get_financial_data(self, supplier_id: str) -> List[FinancialStatement]:
        with self._connect() as connection:
            rows = connection.execute(
                "SELECT * FROM financial_statements WHERE supplier_id=? ORDER BY year",
                (supplier_id,),
            ).fetchall()
        return [
            FinancialStatement(
                supplier_id=row["supplier_id"],
                year=row["year"],
                **{name: _decimal(row[name]) for name in _MONEY_COLUMNS},
            )
            for row in rows
        ]

    def get_transactions(self, supplier_id: str) -> List[Transaction]:
        with self._connect() as connection:
            rows = connection.execute(
                "SELECT * FROM transactions WHERE supplier_id=? ORDER BY id", (supplier_id,)
            ).fetchall()
        return [
            Transaction(
                supplier_id=row["supplier_id"],
                buyer_name=row["buyer_name"],
                payment_term_days=row["payment_term_days"],
                net_amount=_decimal(row["net_amount"]),
                transaction_id=row["transaction_id"],
                po_date=_date(row["po_date"]),
                delivery_date=_date(row["delivery_date"]),
                invoice_date=_date(row["invoice_date"]),
                payment_date=_date(row["payment_date"]),
                receipt_date=_date(row["receipt_date"]),
            )
            for row in rows
        ]

    def get_documents(self, supplier_id: str) -> List[Document]:
        with self._connect() as connection:
            rows = connection.execute(
                "SELECT * FROM documents WHERE supplier_id=? ORDER BY id", (supplier_id,)
            ).fetchall()
        return [
            Document(
                supplier_id=row["supplier_id"],
                document_type=row["document_type"],
                document_name=row["document_name"],
                is_submitted=bool(row["is_submitted"]),
                submitted_date=_date(row["submitted_date"]),
                is_verified=bool(row["is_verified"]),
            )
            for row in rows
        ]

    def get_score(self, supplier_id: str) -> Optional[Score]:
        with self._connect() as connection:
            row = connection.execute(
                "SELECT * FROM scores WHERE supplier_id=?", (supplier_id,)
            ).fetchone()
        if row is None:
            return None
        return Score(
            supplier_id=row["supplier_id"],
            financial_score=row["financial_score"],
            financial_grade=row["financial_grade"],
            transactional_score=row["transactional_score"],
            a_score=row["a_score"],
            overall_credit_score=row["overall_credit_score"],
            recommendation=row["recommendation"],
            last_updated=date.fromisoformat(row["last_updated"]),
        )

    def create_score(self, score: Score) -> Score:
        self._write_score(score)
        return score

    def update_score(self, supplier_id: str, score: Score) -> Score:
        if self.get_score(supplier_id) is None:
            raise ScoreNotFoundError(f"No score stored for supplier '{supplier_id}'")
        score = replace(score, supplier_id=supplier_id)
        self._write_score(score)
        return score

    def update_supplier_status(self, supplier_id: str, status: str) -> None:
        with self._connect() as connection:
            cursor = connection.execute(
                "UPDATE suppliers SET status=?, updated_at=CURRENT_TIMESTAMP WHERE supplier_id=?",
                (status, supplier_id),
            )
        if cursor.rowcount == 0:
            raise SupplierNotFoundError(f"Supplier '{supplier_id}' not found")

    def _write_score(self, score: Score) -> None:
        with self._connect() as connection:
            connection.execute(
                """
                INSERT INTO scores (
                    supplier_id, financial_score, financial_grade, transactional_score,
                    a_score, overall_credit_score, recommendation, last_updated
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(supplier_id) DO UPDATE SET
                    financial_score=excluded.financial_score,
                    financial_grade=excluded.financial_grade,
                    transactional_score=excluded.transactional_score,
                    a_score=excluded.a_score,
                    overall_credit_score=excluded.overall_credit_score,
                    recommendation=excluded.recommendation,
                    last_updated=excluded.last_updated
                """,
                (
                    score.supplier_id,
                    score.financial_score,
                    score.financial_grade,
                    score.transactional_score,
                    score.a_score,
                    score.overall_credit_score,
                    score.recommendation,
                    score.last_updated.isoformat(),
                ),
            )
        logger.debug("Persisted score for supplier %s", score.supplier_id)

    @staticmethod
    def _supplier(row: sqlite3.Row) -> Supplier:
        return Supplier(
            supplier_id=row["supplier_id"],
            company_name=row["company_name"],
            registration_type=row["registration_type"],
            vat_registered=bool(row["vat_registered"]),
            years_of_operation=row["years_of_operation"],
            business_type=row["business_type"],
            status=row["status"],
            tax_id=row["tax_id"],
            established_date=_date(row["established_date"]),
            address=row["address"],
            contact_person=row["contact_person"],
        )


__all__ = [
    "InMemoryRepository",
    "SQLiteRepository",
    "ScoreNotFoundError",
    "SupplierNotFoundError",
    "SupplierRepository",
]
