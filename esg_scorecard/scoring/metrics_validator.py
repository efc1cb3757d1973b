"""
Metrics Validator
esg_scorecard/scoring/metrics_validator.py

Closing consistency check over composed metrics. Violations are returned as
ConsistencyIssue records; the metrics themselves are never changed or
withheld.

Checks:
    - percentage fields in [0, 100], stars in [0, 5], confidence in [0, 1],
      overall raw score in [-1, 1], average rating in [0, 5]
    - endorsements + rejections ≤ total validations
    - |overall_percentage − Σ w × pillar_percentage| ≤ 0.5
    - |endorsement_rate − endorsements / total × 100| ≤ 0.1
"""

from decimal import Decimal
from typing import List

import structlog

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.models.scorecard import ConsistencyIssue, ESGMetrics, ValidationMetrics
from esg_scorecard.scoring.weighted_aggregator import WeightedAggregator

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _check_range(
    issues: List[ConsistencyIssue],
    name: str,
    value,
    low: Decimal,
    high: Decimal,
) -> None:
    value_d = Decimal(value)
    if not low <= value_d <= high:
        issues.append(ConsistencyIssue(
            check=f"{name}_range",
            message=f"{name} = {value_d} is outside [{low}, {high}]",
            observed=value_d,
        ))


class MetricsValidator:
    """Report invariant violations in ESGMetrics and ValidationMetrics."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config
        self._aggregator = WeightedAggregator(config)

    def _check_counts(
        self,
        issues: List[ConsistencyIssue],
        total: int,
        endorsements: int,
        rejections: int,
        endorsement_rate: Decimal,
    ) -> None:
        if endorsements + rejections > total:
            issues.append(ConsistencyIssue(
                check="validation_counts",
                message=(
                    f"endorsements ({endorsements}) + rejections ({rejections}) "
                    f"exceed total validations ({total})"
                ),
                observed=Decimal(endorsements + rejections),
                expected=Decimal(total),
            ))

        expected_rate = (Decimal(endorsements) * HUNDRED / Decimal(total)) if total else ZERO
        if abs(endorsement_rate - expected_rate) > self.config.endorsement_rate_tolerance:
            issues.append(ConsistencyIssue(
                check="endorsement_rate",
                message=(
                    f"endorsement_rate {endorsement_rate} does not match "
                    f"{endorsements}/{total} = {expected_rate:.2f}%"
                ),
                observed=endorsement_rate,
                expected=expected_rate,
            ))

    def validate(self, metrics: ESGMetrics) -> List[ConsistencyIssue]:
        """
        Check every invariant on a composed ESGMetrics.

        Returns:
            List of ConsistencyIssue, empty when the metrics are consistent.
        """
        issues: List[ConsistencyIssue] = []

        _check_range(issues, "overall_score", metrics.overall_score, Decimal("-1"), Decimal("1"))
        _check_range(issues, "overall_percentage", metrics.overall_percentage, ZERO, HUNDRED)
        _check_range(issues, "overall_stars", metrics.overall_stars, ZERO, Decimal("5"))
        for pillar, percentage in metrics.pillar_percentages().items():
            _check_range(issues, f"{pillar.value}_score", percentage, ZERO, HUNDRED)
        _check_range(issues, "confidence_level", metrics.confidence_level, ZERO, Decimal("1"))
        _check_range(issues, "percentile_rank", metrics.percentile_rank, ZERO, HUNDRED)
        _check_range(issues, "average_rating", metrics.average_rating, ZERO, Decimal("5"))
        _check_range(issues, "endorsement_rate", metrics.endorsement_rate, ZERO, HUNDRED)
        _check_range(issues, "consensus_percentage", metrics.consensus_percentage, ZERO, HUNDRED)

        expected_overall = self._aggregator.combine_pillars(metrics.pillar_percentages())
        if abs(metrics.overall_percentage - expected_overall) > self.config.overall_tolerance:
            issues.append(ConsistencyIssue(
                check="overall_weighted_sum",
                message=(
                    f"overall_percentage {metrics.overall_percentage} differs from the "
                    f"weighted pillar sum {expected_overall} by more than "
                    f"{self.config.overall_tolerance} points"
                ),
                observed=metrics.overall_percentage,
                expected=expected_overall,
            ))

        self._check_counts(
            issues,
            metrics.total_validations,
            metrics.endorsements,
            metrics.rejections,
            metrics.endorsement_rate,
        )

        if issues:
            logger.warning(
                "metrics_inconsistent",
                issue_count=len(issues),
                issues=[issue.message for issue in issues],
            )
        return issues

    def validate_validation(self, validation: ValidationMetrics) -> List[ConsistencyIssue]:
        """Check the invariants of a ValidationMetrics on its own."""
        issues: List[ConsistencyIssue] = []

        _check_range(issues, "average_rating", validation.average_rating, ZERO, Decimal("5"))
        _check_range(issues, "endorsement_rate", validation.endorsement_rate, ZERO, HUNDRED)
        _check_range(issues, "consensus_percentage", validation.consensus_percentage, ZERO, HUNDRED)
        _check_range(issues, "verified_rate", validation.verified_rate, ZERO, HUNDRED)
        self._check_counts(
            issues,
            validation.total_validations,
            validation.endorsements,
            validation.rejections,
            validation.endorsement_rate,
        )

        if issues:
            logger.warning(
                "validation_metrics_inconsistent",
                issue_count=len(issues),
                issues=[issue.message for issue in issues],
            )
        return issues
