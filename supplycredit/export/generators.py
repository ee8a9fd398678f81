"""Utilities to produce consolidated credit score exports."""
from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from supplycredit.scoring.config import ScoringConfig
from supplycredit.scoring.report import build_report, portfolio_summary
from supplycredit.scoring.repository import SQLiteRepository


@dataclass(slots=True)
class ExportSummary:
    """Details about the generated export files."""

    score_rows: int
    files: List[Path]


class ExportGenerator:
    """Create CSV/Excel artifacts from the scores persisted in SQLite."""

    def __init__(
        self,
        sqlite_path: Path,
        output_dir: Path,
        config: ScoringConfig | None = None,
    ) -> None:
        self.repository = SQLiteRepository(sqlite_path)
        self.output_dir = output_dir
        self.config = config or ScoringConfig.default()

    def generate(self, run_id: str) -> ExportSummary:
        """Generate CSV/Excel exports tagged with *run_id*."""

        rows = self.score_rows()
        if not rows:
            return ExportSummary(0, [])

        self.output_dir.mkdir(parents=True, exist_ok=True)
        scores_csv = self.output_dir / f"credit_scores_{run_id}.csv"
        workbook_path = self.output_dir / f"credit_report_{run_id}.xlsx"

        self._write_csv(scores_csv, rows)
        self._write_workbook(workbook_path, rows)
        return ExportSummary(score_rows=len(rows), files=[scores_csv, workbook_path])

    # ------------------------------------------------------------------
    # Data retrieval helpers
    # ------------------------------------------------------------------

    def score_rows(self) -> List[Dict[str, object]]:
        rows: List[Dict[str, object]] = []
        for supplier in self.repository.list_suppliers():
            score = self.repository.get_score(supplier.supplier_id)
            if score is None:
                continue
            report = build_report(supplier, score, self.config)
            rows.append(
                {
                    "supplier_id": supplier.supplier_id,
                    "company_name": supplier.company_name,
                    "registration_type": supplier.registration_type,
                    "financial_score": score.financial_score,
                    "financial_grade": score.financial_grade,
                    "transactional_score": score.transactional_score,
                    "a_score": score.a_score,
                    "overall_credit_score": score.overall_credit_score,
                    "recommendation": score.recommendation,
                    "standing": report.standing,
                    "advance_rate": report.pricing.advance_rate,
                    "service_fee": report.pricing.service_fee,
                    "credit_limit_m": report.pricing.credit_limit,
                    "credit_limit_range": report.pricing.credit_limit_range,
                    "interest_rate": report.pricing.interest_rate,
                    "last_updated": score.last_updated.isoformat(),
                }
            )
        rows.sort(key=lambda row: row["overall_credit_score"], reverse=True)
        return rows

    def _summary_rows(self) -> List[Dict[str, object]]:
        summary = portfolio_summary(self.repository.list_suppliers())
        return [{"status": status, "suppliers": count} for status, count in summary.items()]

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _write_csv(self, path: Path, rows: Sequence[Mapping[str, object]]) -> None:
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)

    def _write_workbook(self, path: Path, rows: Sequence[Mapping[str, object]]) -> None:
        workbook = Workbook()
        scores_sheet = workbook.active
        scores_sheet.title = "Scores"
        self._write_sheet(scores_sheet, rows)
        summary_sheet = workbook.create_sheet("Portfolio")
        self._write_sheet(summary_sheet, self._summary_rows())
        workbook.save(path)

    def _write_sheet(self, worksheet, rows: Sequence[Mapping[str, object]]) -> None:
        fieldnames = list(rows[0].keys()) if rows else ["message"]
        if not rows:
            rows = [{"message": "No data available"}]
        worksheet.append(fieldnames)
        for row in rows:
            worksheet.append([row.get(name) for name in fieldnames])
        for index, _ in enumerate(fieldnames, start=1):
            worksheet.column_dimensions[get_column_letter(index)].width = 18
        worksheet.freeze_panes = "A2"


__all__ = ["ExportGenerator", "ExportSummary"]
