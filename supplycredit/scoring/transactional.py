"""Transaction history scoring (T-Score) and the read-only RFM projection."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence

from .config import ScoringConfig, TransactionalRules
from .models import RFMProjection, Transaction, TransactionalAssessment
from .numbers import half_up


class TransactionalScorer:
    """Additive rubric over payment terms and transaction volume."""

    def __init__(self, config: ScoringConfig) -> None:
        self.rules: TransactionalRules = config.transactional

    def score(self, transactions: Sequence[Transaction]) -> TransactionalAssessment:
        rules = self.rules
        count = len(transactions)
        if count == 0:
            return TransactionalAssessment(
                score=rules.base_score, transaction_count=0, average_payment_term=None
            )

        adjustments: dict[str, int] = {}
        average_term = sum(item.payment_term_days for item in transactions) / count
        if average_term <= rules.max_payment_term:
            adjustments["payment_term"] = rules.payment_term_points
        for min_count, points in rules.volume_bonuses:
            if count >= min_count:
                adjustments[f"volume_{min_count}"] = points

        total = min(rules.max_score, rules.base_score + sum(adjustments.values()))
        return TransactionalAssessment(
            score=total,
            transaction_count=count,
            average_payment_term=average_term,
            adjustments=adjustments,
        )

    def rfm_projection(self, transactions: Sequence[Transaction], today: date) -> RFMProjection:
        """Derive 1-5 recency, frequency and monetary ratings for display."""

        rules = self.rules
        if not transactions:
            # Neutral prior, same as the persisted score with no history.
            recency, frequency, monetary = rules.empty_projection
            return RFMProjection(
                recency=recency, frequency=frequency, monetary=monetary, score=rules.base_score
            )

        dates = [item.activity_date for item in transactions if item.activity_date]
        days_since = (today - max(dates)).days if dates else None
        recency = 1
        if days_since is not None:
            for max_days, points in rules.recency_days:
                if days_since <= max_days:
                    recency = points
                    break

        total_value = sum((item.net_amount for item in transactions), Decimal("0"))
        frequency = int(rules.frequency.lookup(len(transactions)))
        monetary = int(rules.monetary.lookup(float(total_value)))
        return RFMProjection(
            recency=recency,
            frequency=frequency,
            monetary=monetary,
            score=int(half_up((recency + frequency + monetary) / 15 * 100)),
            total_value=total_value,
            days_since_latest=days_since,
        )


__all__ = ["TransactionalScorer"]
