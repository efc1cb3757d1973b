"""
Score Normalizer
esg_scorecard/scoring/score_normalizer.py

Maps a raw score in [-1, 1] to a percentage, a star count and a letter grade.

Formula:
    percentage = clamp(((score + 1) / 2) × 100, 0, 100)

Stars and grades are read independently from the percentage, each from its
own band table (lower bounds inclusive, so 60.00 is 3 stars and C+):

    Stars:  ≥90 → 5   ≥75 → 4   ≥60 → 3   ≥40 → 2   else 1
    Grade:  ≥90 A+  ≥85 A  ≥80 A-  ≥75 B+  ≥70 B  ≥65 B-
            ≥60 C+  ≥55 C  ≥50 C-  ≥45 D+  ≥40 D  else F
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple, TypeVar

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.scoring.utils import PERCENT_QUANTUM, SCORE_QUANTUM, clamp, quantize, to_decimal

T = TypeVar("T")

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class NormalizedScore:
    """Output of ScoreNormalizer.normalize()."""
    percentage: Decimal   # [0, 100] quantized to 0.01
    stars: int            # [1, 5]
    grade: str            # "A+" .. "F"


def _lookup(bands: Tuple[Tuple[Decimal, T], ...], value: Decimal) -> T:
    """Value of the first band whose lower bound is <= value."""
    for lower_bound, result in bands:
        if value >= lower_bound:
            return result
    # Bands are validated to end at 0; only negative inputs reach here.
    return bands[-1][1]


class ScoreNormalizer:
    """Percentage, star and grade conversions."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    def to_percentage(self, score) -> Decimal:
        """
        Linear map [-1, 1] → [0, 100], clamped.

        Examples:
            >>> ScoreNormalizer().to_percentage(0.2)
            Decimal('60.00')
        """
        raw = (to_decimal(score) + Decimal("1")) / Decimal("2") * HUNDRED
        return clamp(quantize(raw, PERCENT_QUANTUM), Decimal("0"), HUNDRED)

    def to_score(self, percentage) -> Decimal:
        """Inverse of to_percentage: [0, 100] → [-1, 1]."""
        pct = clamp(to_decimal(percentage), Decimal("0"), HUNDRED)
        return quantize(pct / Decimal("50") - Decimal("1"), SCORE_QUANTUM)

    def to_stars(self, percentage) -> int:
        pct = clamp(to_decimal(percentage), Decimal("0"), HUNDRED)
        return _lookup(self.config.star_bands, pct)

    def to_grade(self, percentage) -> str:
        pct = clamp(to_decimal(percentage), Decimal("0"), HUNDRED)
        return _lookup(self.config.grade_bands, pct)

    def confidence_label(self, confidence) -> str:
        """Text band for a confidence level in [0, 1]."""
        conf = clamp(to_decimal(confidence), Decimal("0"), Decimal("1"))
        return _lookup(self.config.confidence_labels, conf)

    def normalize(self, score) -> NormalizedScore:
        percentage = self.to_percentage(score)
        return NormalizedScore(
            percentage=percentage,
            stars=self.to_stars(percentage),
            grade=self.to_grade(percentage),
        )
