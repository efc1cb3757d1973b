"""
Decimal Utilities
esg_scorecard/scoring/utils.py

Provides precision-safe decimal math for scorecard calculations.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

SCORE_QUANTUM = Decimal("0.0001")     # raw scores, confidence, weights
PERCENT_QUANTUM = Decimal("0.01")     # percentages and rates


def to_decimal(value: float) -> Decimal:
    """Convert a float (or int/str) to Decimal without binary noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal, quantum: Decimal = SCORE_QUANTUM) -> Decimal:
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.to_integral_value(rounding=ROUND_HALF_UP))


def weighted_mean(values: List[Decimal], weights: List[Decimal]) -> Decimal:
    """
    Calculate weighted mean.

    Formula: Σ(value_i × weight_i) / Σ(weight_i)
    Returns Decimal("0") if all weights are zero (including empty input).
    """
    if len(values) != len(weights):
        raise ValueError("values and weights must have same length")

    total_weight = sum(weights, Decimal("0"))
    if total_weight == 0:
        return Decimal("0")

    numerator = sum((v * w for v, w in zip(values, weights)), Decimal("0"))
    return quantize(numerator / total_weight)


def percent(part: int, whole: int) -> Decimal:
    """part / whole × 100, quantized to 0.01; 0 when whole is 0."""
    if whole == 0:
        return Decimal("0")
    return quantize(Decimal(part) * Decimal("100") / Decimal(whole), PERCENT_QUANTUM)


def ensure_utc(moment: Optional[datetime] = None) -> datetime:
    """Return an aware UTC datetime; None means the current time."""
    if moment is None:
        return datetime.now(timezone.utc)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
