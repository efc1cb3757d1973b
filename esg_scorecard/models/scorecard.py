"""
Scorecard output records.

Calculators return these dataclasses holding Decimal values, quantized at the
point they are produced (raw scores 0.0001, percentages and rates 0.01).
as_dict() renders them with floats for reports and JSON.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from esg_scorecard.models.enumerations import Pillar


@dataclass(frozen=True)
class ValidationEntry:
    """One rating in the validation history."""
    id: str
    validator_name: str
    validator_role: str
    organization: str
    rating: Decimal
    statement: str
    verified: bool
    timestamp: datetime               # parent claim's creation time
    expertise: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "validator_name": self.validator_name,
            "validator_role": self.validator_role,
            "organization": self.organization,
            "rating": float(self.rating),
            "statement": self.statement,
            "verified": self.verified,
            "timestamp": self.timestamp.isoformat(),
            "expertise": list(self.expertise),
        }


@dataclass(frozen=True)
class ValidationMetrics:
    """Output of ValidationAggregator.aggregate()."""
    total_validations: int
    endorsements: int
    rejections: int
    average_rating: Decimal          # [0, 5], quantized to 0.0001
    endorsement_rate: Decimal        # [0, 100], quantized to 0.01
    consensus_percentage: Decimal    # [0, 100], quantized to 0.01
    verified_rate: Decimal           # [0, 100], quantized to 0.01
    validator_count: int             # 0 means verified_rate is the configured default
    validation_history: Tuple[ValidationEntry, ...] = ()
    rating_distribution: Dict[int, int] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_validations": self.total_validations,
            "endorsements": self.endorsements,
            "rejections": self.rejections,
            "average_rating": float(self.average_rating),
            "endorsement_rate": float(self.endorsement_rate),
            "consensus_percentage": float(self.consensus_percentage),
            "verified_rate": float(self.verified_rate),
            "validator_count": self.validator_count,
            "validation_history": [e.as_dict() for e in self.validation_history],
            "rating_distribution": dict(self.rating_distribution),
        }


@dataclass(frozen=True)
class ESGMetrics:
    """Composed scorecard for one claim set."""
    overall_score: Decimal           # raw, [-1, 1]
    overall_percentage: Decimal      # [0, 100]
    overall_stars: int               # [0, 5], 0 only when there is no data
    overall_grade: str               # "A+" .. "F", "N/A" when there is no data
    environmental_score: Decimal     # pillar percentage, [0, 100]
    social_score: Decimal
    governance_score: Decimal
    confidence_level: Decimal        # [0, 1]
    confidence_label: str
    percentile_rank: int             # [0, 100]
    total_validations: int
    endorsements: int
    rejections: int
    average_rating: Decimal
    endorsement_rate: Decimal
    consensus_percentage: Decimal
    last_updated: datetime

    def pillar_percentages(self) -> Dict[Pillar, Decimal]:
        return {
            Pillar.ENVIRONMENTAL: self.environmental_score,
            Pillar.SOCIAL: self.social_score,
            Pillar.GOVERNANCE: self.governance_score,
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": float(self.overall_score),
            "overall_percentage": float(self.overall_percentage),
            "overall_stars": self.overall_stars,
            "overall_grade": self.overall_grade,
            "environmental_score": float(self.environmental_score),
            "social_score": float(self.social_score),
            "governance_score": float(self.governance_score),
            "confidence_level": float(self.confidence_level),
            "confidence_label": self.confidence_label,
            "percentile_rank": self.percentile_rank,
            "total_validations": self.total_validations,
            "endorsements": self.endorsements,
            "rejections": self.rejections,
            "average_rating": float(self.average_rating),
            "endorsement_rate": float(self.endorsement_rate),
            "consensus_percentage": float(self.consensus_percentage),
            "last_updated": self.last_updated.isoformat(),
        }


@dataclass(frozen=True)
class PillarBreakdown:
    """How one pillar's score was reached."""
    pillar: Pillar
    claim_count: int
    average_score: Decimal           # unweighted mean of raw scores
    weighted_score: Decimal          # confidence/recency weighted raw score
    percentage: Decimal              # 0 when the pillar has no claims
    weight: Decimal
    weighted_contribution: Decimal   # weight × percentage
    used_fallback: bool              # scored from general/overall claims
    keywords: Tuple[str, ...]

    @property
    def has_data(self) -> bool:
        return self.claim_count > 0


@dataclass(frozen=True)
class ConsistencyIssue:
    """A violated invariant found by MetricsValidator."""
    check: str
    message: str
    observed: Optional[Decimal] = None
    expected: Optional[Decimal] = None


@dataclass(frozen=True)
class ScorecardResult:
    """Metrics plus everything needed to explain and sanity-check them."""
    metrics: ESGMetrics
    validation: ValidationMetrics
    pillars: Dict[Pillar, PillarBreakdown]
    warnings: List[ConsistencyIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.warnings


@dataclass(frozen=True)
class SubjectScorecard:
    """One organization's scorecard within a ranked set."""
    subject: str
    claim_count: int
    result: ScorecardResult
