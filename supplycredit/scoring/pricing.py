"""Indicative factoring terms derived from a persisted score.

Terms are recomputed on every read and never stored. Every adjustment is an
independent multiplier (credit limit) or additive delta (interest rate), so the
order in which they are applied does not change the result; rounding happens
once, on the final figure.
"""
from __future__ import annotations

from .config import PricingRules, ScoringConfig
from .models import PricingTerms, Score
from .numbers import half_up


def advance_rate_band(overall: int, rules: PricingRules) -> str:
    return rules.advance_rate.lookup(overall)


def service_fee_band(overall: int, financial: int, rules: PricingRules) -> str:
    for tier in rules.service_fees:
        if tier.matches(overall, financial):
            return tier.band
    return rules.default_service_fee


def credit_limit(
    score: Score, years_of_operation: int, vat_registered: bool, rules: PricingRules
) -> int:
    """Credit limit in millions, after adjustments and the tier ceiling."""

    overall = score.overall_credit_score
    base = float(rules.base_limit.lookup(overall))
    factor = rules.grade_factors.get(score.financial_grade, 1.0)
    factor *= float(rules.transactional_factor.lookup(score.transactional_score))
    factor *= float(rules.years_factor.lookup(years_of_operation))
    if vat_registered:
        factor *= rules.vat_factor
    factor *= float(rules.document_factor.lookup(score.a_score))

    ceiling = rules.default_ceiling
    for candidate in rules.ceilings:
        if overall >= candidate.min_overall and years_of_operation >= candidate.min_years:
            ceiling = candidate.cap
            break
    return int(half_up(min(base * factor, ceiling)))


def credit_limit_range(limit: int, rules: PricingRules) -> str:
    delta = int(rules.range_delta.lookup(limit))
    return f"{limit}–{limit + delta}M"


def interest_rate(
    score: Score, years_of_operation: int, vat_registered: bool, rules: PricingRules
) -> float:
    rate = float(rules.base_rate.lookup(score.overall_credit_score))
    rate += float(rules.financial_delta.lookup(score.financial_score))
    rate += float(rules.transactional_delta.lookup(score.transactional_score))
    rate += float(rules.years_delta.lookup(years_of_operation))
    registered_delta, unregistered_delta = rules.vat_delta
    rate += registered_delta if vat_registered else unregistered_delta
    rate += float(rules.document_delta.lookup(score.a_score))
    return float(half_up(max(rate, rules.min_interest_rate), places=2))


def derive_pricing(
    score: Score,
    years_of_operation: int,
    vat_registered: bool,
    config: ScoringConfig | None = None,
) -> PricingTerms:
    rules = (config or ScoringConfig.default()).pricing
    limit = credit_limit(score, years_of_operation, vat_registered, rules)
    return PricingTerms(
        advance_rate=advance_rate_band(score.overall_credit_score, rules),
        service_fee=service_fee_band(score.overall_credit_score, score.financial_score, rules),
        credit_limit=limit,
        credit_limit_range=credit_limit_range(limit, rules),
        interest_rate=interest_rate(score, years_of_operation, vat_registered, rules),
    )


__all__ = [
    "advance_rate_band",
    "credit_limit",
    "credit_limit_range",
    "derive_pricing",
    "interest_rate",
    "service_fee_band",
]
