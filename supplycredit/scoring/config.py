"""Helpers to load and validate the scoring rubric configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml


@dataclass(slots=True)
class Tier:
    """A lower bound and the value awarded at or above it."""

    min: float
    value: Any


@dataclass(slots=True)
class TierTable:
    """Descending list of tiers; the first tier whose bound is met wins."""

    tiers: List[Tier]
    default: Any

    def lookup(self, value: float) -> Any:
        for tier in self.tiers:
            if value >= tier.min:
                return tier.value
        return self.default

    @classmethod
    def of(cls, pairs: Sequence[Tuple[float, Any]], default: Any) -> "TierTable":
        return cls(tiers=[Tier(min=bound, value=value) for bound, value in pairs], default=default)


def _default_points() -> Dict[str, int]:
    return {
        "entity_type": 10,
        "vat_registration": 10,
        "years_of_operation": 10,
        "revenue": 15,
        "profitability": 15,
        "leverage": 15,
        "liquidity": 15,
        "interest_coverage": 10,
    }


def _default_grades() -> TierTable:
    # "D" shares the 60 bound with "D+" and can never be reached.
    return TierTable.of(
        [
            (95, "AAA"),
            (90, "AA"),
            (85, "A"),
            (80, "B+"),
            (75, "B"),
            (70, "C+"),
            (65, "C"),
            (60, "D+"),
            (60, "D"),
        ],
        "F",
    )


@dataclass(slots=True)
class FinancialRules:
    qualifying_registration_types: Tuple[str, ...] = ("PLC", "Ltd", "LP")
    min_years_of_operation: int = 2
    min_revenue: Decimal = Decimal("30000000")
    max_debt_to_equity: float = 4.0
    min_current_ratio: float = 1.0
    min_interest_coverage: float = 1.0
    interest_coverage_sentinel: float = 999.0
    points: Dict[str, int] = field(default_factory=_default_points)
    max_score: int = 100
    grades: TierTable = field(default_factory=_default_grades)


@dataclass(slots=True)
class TransactionalRules:
    base_score: int = 50
    max_payment_term: float = 180
    payment_term_points: int = 20
    volume_bonuses: List[Tuple[int, int]] = field(default_factory=lambda: [(5, 15), (10, 15)])
    max_score: int = 100
    recency_days: List[Tuple[int, int]] = field(
        default_factory=lambda: [(30, 5), (90, 4), (180, 3), (365, 2)]
    )
    frequency: TierTable = field(
        default_factory=lambda: TierTable.of([(20, 5), (10, 4), (5, 3), (2, 2)], 1)
    )
    monetary: TierTable = field(
        default_factory=lambda: TierTable.of(
            [(50_000_000, 5), (20_000_000, 4), (10_000_000, 3), (5_000_000, 2)], 1
        )
    )
    empty_projection: Tuple[int, int, int] = (3, 1, 1)


@dataclass(slots=True)
class DocumentRules:
    checklist_size: int = 18


@dataclass(slots=True)
class RecommendationRules:
    approve_min_a_score: int = 80
    approve_min_financial: int = 70
    pending_min_a_score: int = 31
    pending_min_financial: int = 60


@dataclass(slots=True)
class FeeTier:
    min_overall: float
    band: str
    min_financial: Optional[float] = None

    def matches(self, overall: float, financial: float) -> bool:
        if overall < self.min_overall:
            return False
        if self.min_financial is not None and financial < self.min_financial:
            return False
        return True


@dataclass(slots=True)
class LimitCeiling:
    min_overall: float
    min_years: int
    cap: int


def _default_fee_tiers() -> List[FeeTier]:
    return [
        FeeTier(min_overall=85, min_financial=80, band="1.8–2.2%"),
        FeeTier(min_overall=75, min_financial=70, band="2.2–2.8%"),
        FeeTier(min_overall=65, band="2.8–3.5%"),
        FeeTier(min_overall=55, band="3.5–4.2%"),
    ]


def _default_grade_factors() -> Dict[str, float]:
    return {
        "AAA": 1.20,
        "AA": 1.20,
        "A": 1.10,
        "B+": 1.10,
        "B": 1.00,
        "C+": 1.00,
        "C": 0.85,
        "D+": 0.85,
        "D": 0.85,
        "F": 0.70,
    }


@dataclass(slots=True)
class PricingRules:
    advance_rate: TierTable = field(
        default_factory=lambda: TierTable.of([(80, "85–90%"), (60, "75–85%")], "65–75%")
    )
    service_fees: List[FeeTier] = field(default_factory=_default_fee_tiers)
    default_service_fee: str = "4.2–5.0%"
    base_limit: TierTable = field(
        default_factory=lambda: TierTable.of([(80, 50), (60, 25)], 8)
    )
    grade_factors: Dict[str, float] = field(default_factory=_default_grade_factors)
    transactional_factor: TierTable = field(
        default_factory=lambda: TierTable.of([(85, 1.10), (70, 1.00)], 0.90)
    )
    years_factor: TierTable = field(
        default_factory=lambda: TierTable.of([(10, 1.20), (5, 1.10), (2, 1.00)], 0.80)
    )
    vat_factor: float = 1.15
    document_factor: TierTable = field(
        default_factory=lambda: TierTable.of([(80, 1.05), (31, 1.00)], 0.85)
    )
    ceilings: List[LimitCeiling] = field(
        default_factory=lambda: [
            LimitCeiling(min_overall=80, min_years=5, cap=100),
            LimitCeiling(min_overall=60, min_years=2, cap=48),
        ]
    )
    default_ceiling: int = 24
    range_delta: TierTable = field(
        default_factory=lambda: TierTable.of([(50, 10), (20, 5)], 2)
    )
    base_rate: TierTable = field(
        default_factory=lambda: TierTable.of(
            [(90, 1.2), (80, 1.6), (70, 2.0), (60, 2.6), (50, 3.2)], 4.0
        )
    )
    financial_delta: TierTable = field(
        default_factory=lambda: TierTable.of([(80, -0.2), (60, 0.0)], 0.3)
    )
    transactional_delta: TierTable = field(
        default_factory=lambda: TierTable.of([(80, -0.1), (60, 0.0)], 0.2)
    )
    years_delta: TierTable = field(
        default_factory=lambda: TierTable.of([(10, -0.2), (5, -0.1), (2, 0.0)], 0.3)
    )
    vat_delta: Tuple[float, float] = (-0.1, 0.2)
    document_delta: TierTable = field(
        default_factory=lambda: TierTable.of([(80, -0.1), (31, 0.0)], 0.3)
    )
    min_interest_rate: float = 1.0


@dataclass(slots=True)
class ScoringConfig:
    """Parsed scoring rubric."""

    version: int = 1
    financial: FinancialRules = field(default_factory=FinancialRules)
    transactional: TransactionalRules = field(default_factory=TransactionalRules)
    documents: DocumentRules = field(default_factory=DocumentRules)
    recommendation: RecommendationRules = field(default_factory=RecommendationRules)
    pricing: PricingRules = field(default_factory=PricingRules)

    @classmethod
    def default(cls) -> "ScoringConfig":
        return cls()


def _section(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = payload.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"Section '{name}' must be a mapping")
    return section


def _tier_table(raw: Any, fallback: TierTable) -> TierTable:
    if raw is None:
        return fallback
    if not isinstance(raw, Mapping) or not isinstance(raw.get("tiers"), list):
        raise ValueError(f"Tier table must define a 'tiers' list, got {raw!r}")
    tiers = []
    for entry in raw["tiers"]:
        if not isinstance(entry, Mapping) or "min" not in entry or "value" not in entry:
            raise ValueError(f"Tier entries need 'min' and 'value', got {entry!r}")
        tiers.append(Tier(min=float(entry["min"]), value=entry["value"]))
    return TierTable(tiers=tiers, default=raw.get("default", fallback.default))


def _pairs(raw: Any, fallback: List[Tuple[int, int]], keys: Tuple[str, str]) -> List[Tuple[int, int]]:
    if raw is None:
        return fallback
    pairs = []
    for entry in raw:
        try:
            pairs.append((int(entry[keys[0]]), int(entry[keys[1]])))
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid entry {entry!r}; expected keys {keys}") from exc
    return pairs


def _load_financial(raw: Mapping[str, Any]) -> FinancialRules:
    rules = FinancialRules()
    if "qualifying_registration_types" in raw:
        rules.qualifying_registration_types = tuple(
            str(item) for item in raw["qualifying_registration_types"]
        )
    for key in ("min_years_of_operation", "max_score"):
        if key in raw:
            setattr(rules, key, int(raw[key]))
    if "min_revenue" in raw:
        rules.min_revenue = Decimal(str(raw["min_revenue"]))
    for key in (
        "max_debt_to_equity",
        "min_current_ratio",
        "min_interest_coverage",
        "interest_coverage_sentinel",
    ):
        if key in raw:
            setattr(rules, key, float(raw[key]))
    for key, value in _section(raw, "points").items():
        if key not in rules.points:
            raise ValueError(f"Unknown financial criterion '{key}'")
        rules.points[key] = int(value)
    rules.grades = _tier_table(raw.get("grades"), rules.grades)
    return rules


def _load_transactional(raw: Mapping[str, Any]) -> TransactionalRules:
    rules = TransactionalRules()
    for key in ("base_score", "payment_term_points", "max_score"):
        if key in raw:
            setattr(rules, key, int(raw[key]))
    if "max_payment_term" in raw:
        rules.max_payment_term = float(raw["max_payment_term"])
    rules.volume_bonuses = _pairs(raw.get("volume_bonuses"), rules.volume_bonuses, ("min_count", "points"))
    rfm = _section(raw, "rfm")
    rules.recency_days = _pairs(rfm.get("recency_days"), rules.recency_days, ("max_days", "points"))
    rules.frequency = _tier_table(rfm.get("frequency"), rules.frequency)
    rules.monetary = _tier_table(rfm.get("monetary"), rules.monetary)
    return rules


def _load_recommendation(raw: Mapping[str, Any]) -> RecommendationRules:
    rules = RecommendationRules()
    for key in (
        "approve_min_a_score",
        "approve_min_financial",
        "pending_min_a_score",
        "pending_min_financial",
    ):
        if key in raw:
            setattr(rules, key, int(raw[key]))
    return rules


def _load_pricing(raw: Mapping[str, Any]) -> PricingRules:
    rules = PricingRules()
    for name in (
        "advance_rate",
        "base_limit",
        "transactional_factor",
        "years_factor",
        "document_factor",
        "range_delta",
        "base_rate",
        "financial_delta",
        "transactional_delta",
        "years_delta",
        "document_delta",
    ):
        setattr(rules, name, _tier_table(raw.get(name), getattr(rules, name)))
    if "service_fees" in raw:
        rules.service_fees = [
            FeeTier(
                min_overall=float(entry["min_overall"]),
                min_financial=(
                    float(entry["min_financial"]) if entry.get("min_financial") is not None else None
                ),
                band=str(entry["band"]),
            )
            for entry in raw["service_fees"]
        ]
    if "default_service_fee" in raw:
        rules.default_service_fee = str(raw["default_service_fee"])
    for grade, factor in _section(raw, "grade_factors").items():
        rules.grade_factors[str(grade)] = float(factor)
    if "ceilings" in raw:
        rules.ceilings = [
            LimitCeiling(
                min_overall=float(entry["min_overall"]),
                min_years=int(entry["min_years"]),
                cap=int(entry["cap"]),
            )
            for entry in raw["ceilings"]
        ]
    for key in ("default_ceiling",):
        if key in raw:
            setattr(rules, key, int(raw[key]))
    for key in ("vat_factor", "min_interest_rate"):
        if key in raw:
            setattr(rules, key, float(raw[key]))
    vat_delta = raw.get("vat_delta")
    if vat_delta is not None:
        rules.vat_delta = (float(vat_delta["registered"]), float(vat_delta["unregistered"]))
    return rules


def load_scoring_config(path: Path) -> ScoringConfig:
    """Load the scoring rubric from *path*, overriding built-in defaults."""

    if not path.exists():
        raise FileNotFoundError(f"Scoring configuration not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Scoring configuration at {path} must be a mapping")
    try:
        return ScoringConfig(
            version=int(payload.get("version", 1)),
            financial=_load_financial(_section(payload, "financial")),
            transactional=_load_transactional(_section(payload, "transactional")),
            documents=DocumentRules(
                checklist_size=int(_section(payload, "documents").get("checklist_size", 18))
            ),
            recommendation=_load_recommendation(_section(payload, "recommendation")),
            pricing=_load_pricing(_section(payload, "pricing")),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Invalid scoring configuration at {path}: {exc}") from exc


__all__ = [
    "DocumentRules",
    "FeeTier",
    "FinancialRules",
    "LimitCeiling",
    "PricingRules",
    "RecommendationRules",
    "ScoringConfig",
    "Tier",
    "TierTable",
    "TransactionalRules",
    "load_scoring_config",
]
