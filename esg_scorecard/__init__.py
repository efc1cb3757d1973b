"""
ESG Scorecard Engine

Turns third-party assessment claims about an organization into pillar
scores, an overall weighted score, star rating, letter grade, confidence
level, percentile rank and community-validation statistics.

    from esg_scorecard import compute_metrics, compute_validation_metrics

    metrics = compute_metrics(claims, now=as_of)
    validation = compute_validation_metrics(claims)
"""

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig, Settings, get_settings
from esg_scorecard.models import (
    Claim,
    ConsistencyIssue,
    ESGMetrics,
    Pillar,
    PillarBreakdown,
    ScorecardResult,
    SubjectScorecard,
    ValidationEntry,
    ValidationMetrics,
    Validator,
)
from esg_scorecard.scoring.scorecard_engine import (
    ScorecardEngine,
    compute_metrics,
    compute_validation_metrics,
)

__version__ = "1.0.0"

__all__ = [
    "Claim",
    "ConsistencyIssue",
    "DEFAULT_SCORING_CONFIG",
    "ESGMetrics",
    "Pillar",
    "PillarBreakdown",
    "ScorecardEngine",
    "ScorecardResult",
    "ScoringConfig",
    "Settings",
    "SubjectScorecard",
    "ValidationEntry",
    "ValidationMetrics",
    "Validator",
    "compute_metrics",
    "compute_validation_metrics",
    "get_settings",
]
