"""
Validation Aggregator
esg_scorecard/scoring/validation_aggregator.py

Derives community-validation statistics from every rating attached to a
claim set.

Rating population:
    each claim's own star rating when > 0
  + each validator sub-record's rating when > 0

Statistics:
    endorsement        rating ≥ 4
    rejection          rating ≤ 2          (a 3 counts toward the total only)
    average            mean(ratings)
    endorsement_rate   endorsements / total × 100
    consensus          |{r : |r − average| ≤ 1}| / total × 100
    verified_rate      verified validators / validators × 100
                       (validator sub-records only; 100 when there are none,
                       see validator_count)

History is one entry per star-rated claim plus one per validator, stamped
with the parent claim's creation time and sorted newest first.
"""

from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

import structlog

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.models.claim import Claim
from esg_scorecard.models.scorecard import ValidationEntry, ValidationMetrics
from esg_scorecard.scoring.utils import (
    PERCENT_QUANTUM,
    percent,
    quantize,
    round_half_up,
    to_decimal,
)

logger = structlog.get_logger(__name__)

LEAD_ANALYST_ROLE = "Lead ESG Analyst"
UNKNOWN_VALIDATOR = "Unknown Validator"
DEFAULT_ORGANIZATION = "ESG Rating Agency"

LEAD_ANALYST_EXPERTISE: Tuple[str, ...] = (
    "ESG Assessment", "Sustainability Reporting", "Corporate Governance",
)

ROLE_EXPERTISE: Dict[str, Tuple[str, ...]] = {
    "ESG Analyst": ("ESG Assessment", "Sustainability Reporting", "Risk Analysis"),
    "Sustainability Expert": ("Environmental Impact", "Carbon Footprint", "Green Technology"),
    "Corporate Ethics": ("Business Ethics", "Compliance", "Governance"),
    "Climate Policy Expert": ("Climate Change", "Policy Analysis", "Environmental Law"),
    "Tech Sustainability Analyst": ("Tech Innovation", "Digital Sustainability", "Data Analytics"),
}
DEFAULT_EXPERTISE: Tuple[str, ...] = ("ESG Research", "Corporate Analysis", "Sustainability")


def expertise_for(role: str) -> Tuple[str, ...]:
    return ROLE_EXPERTISE.get(role, DEFAULT_EXPERTISE)


class ValidationAggregator:
    """Endorsement, rejection, consensus and verification statistics."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    def collect_ratings(self, claims: Sequence[Claim]) -> List[Decimal]:
        """All ratings > 0 from claims' own stars and their validators."""
        ratings: List[Decimal] = []
        for claim in claims:
            if claim.stars is not None and claim.stars > 0:
                ratings.append(to_decimal(claim.stars))
            for validator in claim.validators:
                if validator.rating > 0:
                    ratings.append(to_decimal(validator.rating))
        return ratings

    def build_history(self, claims: Sequence[Claim]) -> Tuple[ValidationEntry, ...]:
        """Validation entries for every star-rated claim and validator, newest first."""
        history: List[ValidationEntry] = []
        for claim in claims:
            if claim.stars is not None and claim.stars > 0:
                history.append(ValidationEntry(
                    id=f"claim-{claim.id}",
                    validator_name=claim.author or UNKNOWN_VALIDATOR,
                    validator_role=LEAD_ANALYST_ROLE,
                    organization=claim.curator or DEFAULT_ORGANIZATION,
                    rating=to_decimal(claim.stars),
                    statement=claim.statement or "",
                    verified=True,
                    timestamp=claim.created_at,
                    expertise=LEAD_ANALYST_EXPERTISE,
                ))
            for index, validator in enumerate(claim.validators):
                history.append(ValidationEntry(
                    id=f"validator-{claim.id}-{index}",
                    validator_name=validator.name,
                    validator_role=validator.role,
                    organization=validator.organization,
                    rating=to_decimal(validator.rating),
                    statement=validator.statement,
                    verified=validator.verified,
                    timestamp=claim.created_at,
                    expertise=expertise_for(validator.role),
                ))

        # sorted() is stable, so entries of one claim keep their order
        return tuple(sorted(history, key=lambda e: e.timestamp, reverse=True))

    def rating_distribution(self, ratings: Sequence[Decimal]) -> Dict[int, int]:
        """Count of ratings per star bucket 1..5 (ratings rounded half up)."""
        distribution = {stars: 0 for stars in range(1, 6)}
        for rating in ratings:
            bucket = min(5, max(1, round_half_up(rating)))
            distribution[bucket] += 1
        return distribution

    def verified_rate(self, claims: Sequence[Claim]) -> Tuple[Decimal, int]:
        """(verified_rate, validator_count) over validator sub-records only."""
        validators = [v for claim in claims for v in claim.validators]
        if not validators:
            return self.config.verified_rate_without_validators, 0
        verified = sum(1 for v in validators if v.verified)
        return percent(verified, len(validators)), len(validators)

    def aggregate(self, claims: Sequence[Claim]) -> ValidationMetrics:
        """
        Compute ValidationMetrics for a claim set.

        Args:
            claims: Claims with optional stars and validator sub-records.

        Returns:
            ValidationMetrics; an empty rating population gives zero counts
            and rates rather than an error.

        Examples:
            >>> ValidationAggregator().aggregate([]).verified_rate
            Decimal('100.00')
        """
        ratings = self.collect_ratings(claims)
        verified_rate, validator_count = self.verified_rate(claims)
        history = self.build_history(claims)
        total = len(ratings)

        if total == 0:
            return ValidationMetrics(
                total_validations=0,
                endorsements=0,
                rejections=0,
                average_rating=Decimal("0"),
                endorsement_rate=Decimal("0"),
                consensus_percentage=Decimal("0"),
                verified_rate=quantize(verified_rate, PERCENT_QUANTUM),
                validator_count=validator_count,
                validation_history=history,
                rating_distribution=self.rating_distribution(ratings),
            )

        endorsements = sum(1 for r in ratings if r >= self.config.endorsement_min_rating)
        rejections = sum(1 for r in ratings if r <= self.config.rejection_max_rating)

        average = sum(ratings, Decimal("0")) / Decimal(total)
        in_consensus = sum(
            1 for r in ratings if abs(r - average) <= self.config.consensus_tolerance
        )

        metrics = ValidationMetrics(
            total_validations=total,
            endorsements=endorsements,
            rejections=rejections,
            average_rating=quantize(average),
            endorsement_rate=percent(endorsements, total),
            consensus_percentage=percent(in_consensus, total),
            verified_rate=quantize(verified_rate, PERCENT_QUANTUM),
            validator_count=validator_count,
            validation_history=history,
            rating_distribution=self.rating_distribution(ratings),
        )

        logger.info(
            "validation_metrics_computed",
            total_validations=total,
            endorsements=endorsements,
            rejections=rejections,
            average_rating=float(metrics.average_rating),
            consensus_percentage=float(metrics.consensus_percentage),
            verified_rate=float(metrics.verified_rate),
            validator_count=validator_count,
        )
        return metrics
