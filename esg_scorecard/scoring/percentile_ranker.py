"""
Percentile Ranker
esg_scorecard/scoring/percentile_ranker.py

percentile = round(100 × |{p ∈ population : p < score}| / |population|)

Ties are not counted as below. An empty population ranks at the configured
default (50). Halves round up.
"""

from decimal import Decimal
from typing import Iterable, Optional

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.scoring.utils import round_half_up, to_decimal


class PercentileRanker:
    """Relative standing of a score within a comparison population."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    def rank(self, score, population: Iterable[Optional[float]]) -> int:
        """
        Args:
            score: Raw score to rank.
            population: Comparison scores; may include the score itself.
                        None entries are skipped.

        Returns:
            Integer percentile in [0, 100].

        Examples:
            >>> PercentileRanker().rank(0.5, [0.1, 0.5, 0.9, -0.2])
            50
            >>> PercentileRanker().rank(0.5, [])
            50
        """
        values = [to_decimal(p) for p in population if p is not None]
        if not values:
            return self.config.default_percentile

        target = to_decimal(score)
        below = sum(1 for p in values if p < target)
        return round_half_up(Decimal(below) * Decimal("100") / Decimal(len(values)))
