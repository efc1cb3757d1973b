from esg_scorecard.models.claim import Claim, Validator, parse_claims
from esg_scorecard.models.enumerations import Pillar
from esg_scorecard.models.scorecard import (
    ConsistencyIssue,
    ESGMetrics,
    PillarBreakdown,
    ScorecardResult,
    SubjectScorecard,
    ValidationEntry,
    ValidationMetrics,
)

__all__ = [
    "Claim",
    "ConsistencyIssue",
    "ESGMetrics",
    "Pillar",
    "PillarBreakdown",
    "ScorecardResult",
    "SubjectScorecard",
    "ValidationEntry",
    "ValidationMetrics",
    "Validator",
    "parse_claims",
]
