"""
Weighted Aggregator
esg_scorecard/scoring/weighted_aggregator.py

Combines claims into a single confidence- and recency-weighted score.

Formula:
    recency_weight = exp(−days_since_creation / 180)      # 1 at creation, half-life ≈ 125 days
    claim_weight   = confidence × recency_weight
    aggregate      = Σ(score × claim_weight) / Σ(claim_weight)   # 0 for no claims

    confidence_level = Σ(confidence × recency_weight) / Σ(recency_weight)

    overall_percentage = Σ pillar_weight × pillar_percentage
        with pillar weights (default):
            environmental  0.40
            social         0.30
            governance     0.30

Missing confidence weighs as 0.5; missing score counts as 0.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Sequence

import structlog

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.models.claim import Claim
from esg_scorecard.models.enumerations import Pillar
from esg_scorecard.scoring.utils import (
    PERCENT_QUANTUM,
    clamp,
    ensure_utc,
    quantize,
    to_decimal,
    weighted_mean,
)

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = Decimal("86400")


class WeightedAggregator:
    """Confidence × recency weighted averaging of claim scores."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    def days_since(self, created_at: datetime, now: datetime) -> Decimal:
        """Age in fractional days; claims dated after now count as age 0."""
        elapsed = ensure_utc(now) - ensure_utc(created_at)
        days = to_decimal(elapsed.total_seconds()) / SECONDS_PER_DAY
        return max(Decimal("0"), days)

    def recency_weight(self, created_at: datetime, now: datetime) -> Decimal:
        """
        exp(−days / recency_decay_days), in (0, 1].

        Examples:
            >>> from datetime import datetime, timezone
            >>> t = datetime(2025, 1, 1, tzinfo=timezone.utc)
            >>> WeightedAggregator().recency_weight(t, t)
            Decimal('1')
        """
        days = self.days_since(created_at, now)
        return (-days / self.config.recency_decay_days).exp()

    def confidence_of(self, claim: Claim) -> Decimal:
        if claim.confidence is None:
            return self.config.default_confidence
        return to_decimal(claim.confidence)

    def claim_weight(self, claim: Claim, now: datetime) -> Decimal:
        """confidence × recency_weight."""
        return self.confidence_of(claim) * self.recency_weight(claim.created_at, now)

    def aggregate(self, claims: Sequence[Claim], now: datetime) -> Decimal:
        """
        Confidence- and recency-weighted mean of raw scores.

        Args:
            claims: Claims to combine (normally one pillar's selection).
            now: Reference time for recency decay.

        Returns:
            Weighted score in [-1, 1] quantized to 0.0001, or 0 for no claims.
        """
        values = [to_decimal(c.score) if c.score is not None else Decimal("0") for c in claims]
        weights = [self.claim_weight(c, now) for c in claims]
        score = clamp(weighted_mean(values, weights), Decimal("-1"), Decimal("1"))

        logger.debug(
            "claims_aggregated",
            claim_count=len(claims),
            total_weight=float(sum(weights, Decimal("0"))),
            aggregate=float(score),
        )
        return score

    def weighted_confidence(self, claims: Sequence[Claim], now: datetime) -> Decimal:
        """
        Recency-weighted mean confidence in [0, 1], 0 for no claims.

        The recency weight alone is the weight basis, so confidence is not
        counted twice.
        """
        values = [self.confidence_of(c) for c in claims]
        weights = [self.recency_weight(c.created_at, now) for c in claims]
        return clamp(weighted_mean(values, weights), Decimal("0"), Decimal("1"))

    def combine_pillars(self, pillar_values: Dict[Pillar, Decimal]) -> Decimal:
        """
        Σ pillar_weight × value over all pillars; absent pillars count as 0.

        Works on any linear scale; the engine passes pillar percentages.

        Examples:
            >>> WeightedAggregator().combine_pillars({Pillar.ENVIRONMENTAL: Decimal("60")})
            Decimal('24.00')
        """
        total = sum(
            (weight * pillar_values.get(pillar, Decimal("0"))
             for pillar, weight in self.config.pillar_weights.items()),
            Decimal("0"),
        )
        return quantize(total, PERCENT_QUANTUM)
