"""Validation of raw rows into scoring records.

Everything upstream of the engine is checked here: monetary values must be
finite decimal strings, flags must be recognisable booleans and enumerations
must hold a known value. Rows that fail raise :class:`RecordValidationError`.
"""
from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Mapping, Optional

from supplycredit.scoring.models import (
    RECOMMENDATIONS,
    REGISTRATION_TYPES,
    Document,
    FinancialStatement,
    Supplier,
    Transaction,
)

_TRUE = {"true", "yes", "y", "1", "registered"}
_FALSE = {"false", "no", "n", "0", "", "not registered"}


class RecordValidationError(ValueError):
    """Raised when a raw row cannot be turned into a record."""


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _raw(row: Mapping[str, Any], name: str, *, required: bool = True) -> Any:
    for key in (name, _camel(name)):
        if key in row and row[key] not in (None, ""):
            return row[key]
    if required:
        raise RecordValidationError(f"Missing value for '{name}'")
    return None


def money(value: Any, name: str = "amount") -> Decimal:
    if isinstance(value, Decimal):
        amount = value
    else:
        text = re.sub(r"[,\s]", "", str(value))
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise RecordValidationError(f"'{name}' is not a decimal amount: {value!r}") from exc
    if not amount.is_finite():
        raise RecordValidationError(f"'{name}' must be finite, got {value!r}")
    return amount


def flag(value: Any, name: str = "flag") -> bool:
    if isinstance(value, bool):
        return value
    text = str(value if value is not None else "").strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise RecordValidationError(f"'{name}' is not a boolean: {value!r}")


def integer(value: Any, name: str = "value", *, minimum: Optional[int] = None) -> int:
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise RecordValidationError(f"'{name}' is not an integer: {value!r}") from exc
    if minimum is not None and number < minimum:
        raise RecordValidationError(f"'{name}' must be >= {minimum}, got {number}")
    return number


def iso_date(value: Any, name: str = "date") -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise RecordValidationError(f"'{name}' is not an ISO date: {value!r}") from exc


def _text(row: Mapping[str, Any], name: str, default: str = "") -> str:
    value = _raw(row, name, required=False)
    return str(value).strip() if value is not None else default


def supplier_from_row(row: Mapping[str, Any]) -> Supplier:
    registration_type = str(_raw(row, "registration_type")).strip()
    if registration_type not in REGISTRATION_TYPES:
        raise RecordValidationError(f"Unknown registration type '{registration_type}'")
    status = _text(row, "status", "pending").lower()
    if status not in RECOMMENDATIONS:
        raise RecordValidationError(f"Unknown supplier status '{status}'")
    return Supplier(
        supplier_id=str(_raw(row, "supplier_id")).strip(),
        company_name=str(_raw(row, "company_name")).strip(),
        registration_type=registration_type,
        vat_registered=flag(_raw(row, "vat_registered", required=False), "vat_registered"),
        years_of_operation=integer(
            _raw(row, "years_of_operation"), "years_of_operation", minimum=0
        ),
        business_type=_text(row, "business_type"),
        status=status,
        tax_id=_text(row, "tax_id"),
        established_date=iso_date(_raw(row, "established_date", required=False), "established_date"),
        address=_text(row, "address"),
        contact_person=_text(row, "contact_person"),
    )


def financial_statement_from_row(row: Mapping[str, Any]) -> FinancialStatement:
    amounts = {
        name: money(_raw(row, name), name)
        for name in (
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
    }
    return FinancialStatement(
        supplier_id=str(_raw(row, "supplier_id")).strip(),
        year=integer(_raw(row, "year"), "year", minimum=1900),
        **amounts,
    )


def transaction_from_row(row: Mapping[str, Any]) -> Transaction:
    term = _raw(row, "payment_term_days", required=False)
    if term is None:
        term = _raw(row, "po_payment_term")
    net_amount = _raw(row, "net_amount", required=False)
    if net_amount is None:
        net_amount = _raw(row, "po_net_amount")
    return Transaction(
        supplier_id=str(_raw(row, "supplier_id")).strip(),
        buyer_name=_text(row, "buyer_name"),
        payment_term_days=integer(term, "payment_term_days", minimum=0),
        net_amount=money(net_amount, "net_amount"),
        transaction_id=_text(row, "transaction_id") or None,
        po_date=iso_date(_raw(row, "po_date", required=False), "po_date"),
        delivery_date=iso_date(_raw(row, "delivery_date", required=False), "delivery_date"),
        invoice_date=iso_date(_raw(row, "invoice_date", required=False), "invoice_date"),
        payment_date=iso_date(_raw(row, "payment_date", required=False), "payment_date"),
        receipt_date=iso_date(_raw(row, "receipt_date", required=False), "receipt_date"),
    )


def document_from_row(row: Mapping[str, Any]) -> Document:
    return Document(
        supplier_id=str(_raw(row, "supplier_id")).strip(),
        document_type=str(_raw(row, "document_type")).strip(),
        is_submitted=flag(_raw(row, "is_submitted", required=False), "is_submitted"),
        submitted_date=iso_date(_raw(row, "submitted_date", required=False), "submitted_date"),
        is_verified=flag(_raw(row, "is_verified", required=False), "is_verified"),
        document_name=_text(row, "document_name"),
    )


CONVERTERS: Dict[str, Callable[[Mapping[str, Any]], object]] = {
    "suppliers": supplier_from_row,
    "financial_statements": financial_statement_from_row,
    "transactions": transaction_from_row,
    "documents": document_from_row,
}


__all__ = [
    "CONVERTERS",
    "RecordValidationError",
    "document_from_row",
    "financial_statement_from_row",
    "flag",
    "iso_date",
    "money",
    "supplier_from_row",
    "transaction_from_row",
]
