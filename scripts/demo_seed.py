"""Generate synthetic supplier data files for local QA and demos.

Every value is derived from the supplier id, so running the script twice
produces identical files. The files land in the data directory under the
names listed in ``config/sources.yaml``; run ``scripts/supplycredit_cli.py run``
afterwards to ingest, score and export them.
"""
from __future__ import annotations

import argparse
import csv
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from supplycredit.scoring.documents import REQUIRED_DOCUMENTS
from supplycredit.settings import Settings

logger = logging.getLogger(__name__)

COMPANIES = (
    ("Siam Packaging", "PLC", "Manufacturing"),
    ("Chao Phraya Logistics", "Ltd", "Logistics"),
    ("Lanna Foods", "Ltd", "Food Processing"),
    ("Andaman Marine Supply", "LP", "Wholesale"),
    ("Isan Agro Trading", "other", "Agriculture"),
    ("Bangna Steel Works", "PLC", "Manufacturing"),
    ("Rattanakosin Printing", "Ltd", "Printing"),
    ("Korat Plastics", "LP", "Manufacturing"),
)

BUYERS = ("Central Retail", "Thai Beverage", "SCG Distribution", "CP All", "PTT Global")


class SupplierRandom:
    """Deterministic pseudo-random stream keyed by a supplier id."""

    def __init__(self, key: str) -> None:
        state = 0
        for char in key:
            state = ((state << 5) - state + ord(char)) & 0xFFFFFFFF
        self._state = state

    def random(self) -> float:
        self._state = (self._state * 9301 + 49297) % 233280
        return self._state / 233280

    def between(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def choice(self, options: Sequence):
        return options[int(self.random() * len(options)) % len(options)]


def document_submissions(supplier_id: str) -> List[bool]:
    """Submission flags for the checklist; roughly seven in ten are submitted."""

    seed = sum(ord(char) for char in supplier_id)
    return [
        ((seed * (index + 1) * 1103515245 + 12345) % 2147483647) / 2147483647 > 0.3
        for index in range(len(REQUIRED_DOCUMENTS))
    ]


@dataclass(slots=True)
class DemoDataset:
    suppliers: List[Dict[str, object]]
    financial_statements: List[Dict[str, object]]
    transactions: List[Dict[str, object]]
    documents: List[Dict[str, object]]


def _money(value: float) -> str:
    return f"{value:.2f}"


def build_dataset(count: int, *, today: Optional[date] = None) -> DemoDataset:
    today = today or date.today()
    dataset = DemoDataset([], [], [], [])
    for number in range(1, count + 1):
        supplier_id = f"SUP{number:03d}"
        rng = SupplierRandom(supplier_id)
        name, registration_type, business_type = COMPANIES[(number - 1) % len(COMPANIES)]
        years = int(rng.between(0, 25))
        dataset.suppliers.append(
            {
                "supplier_id": supplier_id,
                "company_name": f"{name} {number:03d}",
                "registration_type": registration_type,
                "vat_registered": "true" if rng.random() > 0.25 else "false",
                "years_of_operation": years,
                "business_type": business_type,
                "tax_id": f"0105{number:09d}",
                "established_date": date(today.year - years, 1, 1).isoformat(),
            }
        )

        revenue = rng.between(30, 200) * 1_000_000
        for offset, year in enumerate(range(today.year - 3, today.year)):
            revenue *= rng.between(0.8, 1.3) if offset else 1.0
            cost = revenue * rng.between(0.5, 0.8)
            gross = revenue - cost
            net_income = gross * rng.between(-0.2, 0.3)
            assets = revenue * rng.between(0.6, 1.2)
            debt = assets * rng.between(0.3, 0.9)
            current_assets = assets * rng.between(0.6, 0.9)
            dataset.financial_statements.append(
                {
                    "supplier_id": supplier_id,
                    "year": year,
                    "sales_revenue": _money(revenue),
                    "cost_of_goods_sold": _money(cost),
                    "gross_profit": _money(gross),
                    "net_income": _money(net_income),
                    "total_assets": _money(assets),
                    "total_debt": _money(debt),
                    "total_equity": _money(assets - debt),
                    "current_assets": _money(current_assets),
                    "current_liabilities": _money(debt * rng.between(0.5, 0.95)),
                    "interest_expense": _money(revenue * rng.between(0.001, 0.03)),
                }
            )

        for index in range(int(rng.between(0, 14))):
            po_date = today - timedelta(days=int(rng.between(5, 400)))
            term = rng.choice((30, 45, 60, 90, 120))
            dataset.transactions.append(
                {
                    "supplier_id": supplier_id,
                    "transaction_id": f"{supplier_id}-PO{index + 1:03d}",
                    "buyer_name": rng.choice(BUYERS),
                    "payment_term_days": term,
                    "net_amount": _money(rng.between(0.2, 8) * 1_000_000),
                    "po_date": po_date.isoformat(),
                    "invoice_date": (po_date + timedelta(days=14)).isoformat(),
                    "payment_date": (po_date + timedelta(days=14 + term)).isoformat(),
                }
            )

        for document_type, submitted in zip(REQUIRED_DOCUMENTS, document_submissions(supplier_id)):
            dataset.documents.append(
                {
                    "supplier_id": supplier_id,
                    "document_type": document_type,
                    "is_submitted": "true" if submitted else "false",
                    "submitted_date": today.isoformat() if submitted else "",
                    "is_verified": "false",
                }
            )
    return dataset


def _write(path: Path, rows: Sequence[Dict[str, object]]) -> None:
    fieldnames: List[str] = []
    for row in rows:
        fieldnames.extend(key for key in row if key not in fieldnames)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)


def write_dataset(dataset: DemoDataset, data_dir: Path) -> List[Path]:
    data_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for kind in ("suppliers", "financial_statements", "transactions", "documents"):
        path = data_dir / f"{kind}.csv"
        _write(path, getattr(dataset, kind))
        written.append(path)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Write deterministic demo supplier files.")
    parser.add_argument("--suppliers", type=int, default=12, help="Number of suppliers to generate")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override the data directory")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    data_dir = args.data_dir or Settings.load().data_dir
    for path in write_dataset(build_dataset(args.suppliers), data_dir):
        logger.info("Wrote %s", path)
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())
