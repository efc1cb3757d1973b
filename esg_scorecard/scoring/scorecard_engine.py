"""
scoring/scorecard_engine.py

Full pipeline: claims → ESG scorecard.

Class: ScorecardEngine
Methods:
    score(claims)                       → ScorecardResult
    compute_metrics(claims)             → ESGMetrics
    compute_validation_metrics(claims)  → ValidationMetrics
    pillar_breakdown(claims)            → Dict[Pillar, PillarBreakdown]
    rank_subjects(claims)               → List[SubjectScorecard]

Pipeline steps:
  1. parse_claims → list of Claim (None → [])
  2. ValidationAggregator → ValidationMetrics (all claims)
  3. keep scorable claims (score present, confidence > 0)
  4. PillarClassifier.select → claims per pillar (with general fallback)
  5. WeightedAggregator → raw pillar scores → ScoreNormalizer → percentages
  6. overall_percentage = Σ w × pillar_percentage; overall_score = inverse map
  7. ScoreNormalizer → stars, grade; WeightedAggregator → confidence level
  8. PercentileRanker → percentile against the comparison population
  9. MetricsValidator → consistency warnings (metrics returned unchanged)

The engine holds no state between calls. "now" is a parameter so results
are reproducible; when omitted the UTC clock is read once per call.
"""

from collections import OrderedDict
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

import structlog

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.models.claim import Claim, parse_claims
from esg_scorecard.models.enumerations import Pillar
from esg_scorecard.models.scorecard import (
    ESGMetrics,
    PillarBreakdown,
    ScorecardResult,
    SubjectScorecard,
    ValidationMetrics,
)
from esg_scorecard.scoring.metrics_validator import MetricsValidator
from esg_scorecard.scoring.percentile_ranker import PercentileRanker
from esg_scorecard.scoring.pillar_classifier import PillarClassifier
from esg_scorecard.scoring.score_normalizer import ScoreNormalizer
from esg_scorecard.scoring.utils import PERCENT_QUANTUM, ensure_utc, quantize, to_decimal
from esg_scorecard.scoring.validation_aggregator import ValidationAggregator
from esg_scorecard.scoring.weighted_aggregator import WeightedAggregator

logger = structlog.get_logger(__name__)

NO_GRADE = "N/A"


class ScorecardEngine:
    """Compose pillar, overall, ranking and validation metrics for a claim set."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config
        self.classifier = PillarClassifier(config)
        self.aggregator = WeightedAggregator(config)
        self.normalizer = ScoreNormalizer(config)
        self.ranker = PercentileRanker(config)
        self.validation_aggregator = ValidationAggregator(config)
        self.metrics_validator = MetricsValidator(config)

    # ------------------------------------------------------------------
    # Pillars
    # ------------------------------------------------------------------

    def _breakdown(self, scorable: Sequence[Claim], now: datetime) -> Dict[Pillar, PillarBreakdown]:
        pillars: Dict[Pillar, PillarBreakdown] = {}
        for pillar in Pillar:
            selection = self.classifier.select(scorable, pillar)
            weight = self.config.pillar_weights[pillar]

            if selection.is_empty:
                weighted_score = Decimal("0")
                average_score = Decimal("0")
                percentage = Decimal("0")
            else:
                weighted_score = self.aggregator.aggregate(selection.claims, now)
                average_score = quantize(
                    sum((to_decimal(c.score) for c in selection.claims), Decimal("0"))
                    / Decimal(len(selection.claims))
                )
                percentage = self.normalizer.to_percentage(weighted_score)

            pillars[pillar] = PillarBreakdown(
                pillar=pillar,
                claim_count=len(selection.claims),
                average_score=average_score,
                weighted_score=weighted_score,
                percentage=percentage,
                weight=weight,
                weighted_contribution=quantize(weight * percentage, PERCENT_QUANTUM),
                used_fallback=selection.used_fallback,
                keywords=self.classifier.keywords_for(pillar),
            )

            logger.debug(
                "pillar_scored",
                pillar=pillar.value,
                claim_count=len(selection.claims),
                used_fallback=selection.used_fallback,
                weighted_score=float(weighted_score),
                percentage=float(percentage),
            )
        return pillars

    def pillar_breakdown(
        self,
        claims: Optional[Iterable[Any]],
        now: Optional[datetime] = None,
    ) -> Dict[Pillar, PillarBreakdown]:
        """Per-pillar claim counts, scores and weighted contributions."""
        scorable = [c for c in parse_claims(claims) if c.is_scorable]
        return self._breakdown(scorable, ensure_utc(now))

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def _default_metrics(self, validation: ValidationMetrics, now: datetime) -> ESGMetrics:
        """Metrics for a claim set with nothing scorable."""
        return ESGMetrics(
            overall_score=Decimal("0"),
            overall_percentage=Decimal("0"),
            overall_stars=0,
            overall_grade=NO_GRADE,
            environmental_score=Decimal("0"),
            social_score=Decimal("0"),
            governance_score=Decimal("0"),
            confidence_level=Decimal("0"),
            confidence_label=self.normalizer.confidence_label(Decimal("0")),
            percentile_rank=self.config.default_percentile,
            total_validations=validation.total_validations,
            endorsements=validation.endorsements,
            rejections=validation.rejections,
            average_rating=validation.average_rating,
            endorsement_rate=validation.endorsement_rate,
            consensus_percentage=validation.consensus_percentage,
            last_updated=now,
        )

    def score(
        self,
        claims: Optional[Iterable[Any]],
        now: Optional[datetime] = None,
        comparison_scores: Optional[Iterable[Optional[float]]] = None,
    ) -> ScorecardResult:
        """
        Run the full scorecard pipeline for one claim set.

        Args:
            claims: Claim models or mappings for one organization. None or
                    empty gives the default result.
            now: Reference time for recency decay and last_updated.
            comparison_scores: Raw scores to rank against. Defaults to the
                    raw scores of the claims themselves.

        Returns:
            ScorecardResult with metrics, validation statistics, the pillar
            breakdown and any consistency warnings.

        Raises:
            InvalidClaimCollectionError: claims is not a collection.
            InvalidClaimError: an item cannot be read as a Claim.
        """
        claim_list = parse_claims(claims)
        now = ensure_utc(now)

        validation = self.validation_aggregator.aggregate(claim_list)
        scorable = [c for c in claim_list if c.is_scorable]
        pillars = self._breakdown(scorable, now)

        if not scorable:
            metrics = self._default_metrics(validation, now)
        else:
            percentages = {p: b.percentage for p, b in pillars.items()}
            overall_percentage = self.aggregator.combine_pillars(percentages)
            overall_score = self.normalizer.to_score(overall_percentage)
            confidence = self.aggregator.weighted_confidence(scorable, now)

            if comparison_scores is None:
                comparison_scores = [c.score for c in claim_list if c.score is not None]
            percentile = self.ranker.rank(overall_score, comparison_scores)

            metrics = ESGMetrics(
                overall_score=overall_score,
                overall_percentage=overall_percentage,
                overall_stars=self.normalizer.to_stars(overall_percentage),
                overall_grade=self.normalizer.to_grade(overall_percentage),
                environmental_score=percentages[Pillar.ENVIRONMENTAL],
                social_score=percentages[Pillar.SOCIAL],
                governance_score=percentages[Pillar.GOVERNANCE],
                confidence_level=confidence,
                confidence_label=self.normalizer.confidence_label(confidence),
                percentile_rank=percentile,
                total_validations=validation.total_validations,
                endorsements=validation.endorsements,
                rejections=validation.rejections,
                average_rating=validation.average_rating,
                endorsement_rate=validation.endorsement_rate,
                consensus_percentage=validation.consensus_percentage,
                last_updated=now,
            )

        warnings = self.metrics_validator.validate(metrics)
        warnings += self.metrics_validator.validate_validation(validation)

        logger.info(
            "metrics_computed",
            claim_count=len(claim_list),
            scorable_count=len(scorable),
            overall_score=float(metrics.overall_score),
            overall_percentage=float(metrics.overall_percentage),
            overall_stars=metrics.overall_stars,
            overall_grade=metrics.overall_grade,
            percentile_rank=metrics.percentile_rank,
            warning_count=len(warnings),
        )

        return ScorecardResult(
            metrics=metrics,
            validation=validation,
            pillars=pillars,
            warnings=warnings,
        )

    def compute_metrics(
        self,
        claims: Optional[Iterable[Any]],
        now: Optional[datetime] = None,
        comparison_scores: Optional[Iterable[Optional[float]]] = None,
    ) -> ESGMetrics:
        """ESGMetrics only; consistency warnings are logged, not returned."""
        return self.score(claims, now=now, comparison_scores=comparison_scores).metrics

    def compute_validation_metrics(self, claims: Optional[Iterable[Any]]) -> ValidationMetrics:
        return self.validation_aggregator.aggregate(parse_claims(claims))

    # ------------------------------------------------------------------
    # Ranking across organizations
    # ------------------------------------------------------------------

    def rank_subjects(
        self,
        claims: Optional[Iterable[Any]],
        now: Optional[datetime] = None,
    ) -> List[SubjectScorecard]:
        """
        Score every subject in a mixed claim set and rank them against each other.

        Each subject's percentile is taken against the overall scores of all
        subjects that have scorable claims. Results are sorted by overall
        percentage, highest first.
        """
        now = ensure_utc(now)
        by_subject: "OrderedDict[str, List[Claim]]" = OrderedDict()
        for claim in parse_claims(claims):
            by_subject.setdefault(claim.subject, []).append(claim)

        results = {subject: self.score(group, now=now) for subject, group in by_subject.items()}
        has_data = {
            subject: any(c.is_scorable for c in group) for subject, group in by_subject.items()
        }
        peer_scores = [r.metrics.overall_score for subject, r in results.items() if has_data[subject]]

        ranked: List[SubjectScorecard] = []
        for subject, result in results.items():
            if has_data[subject]:
                percentile = self.ranker.rank(result.metrics.overall_score, peer_scores)
                result = replace(result, metrics=replace(result.metrics, percentile_rank=percentile))
            ranked.append(SubjectScorecard(
                subject=subject,
                claim_count=len(by_subject[subject]),
                result=result,
            ))

        ranked.sort(key=lambda s: s.result.metrics.overall_percentage, reverse=True)
        logger.info("subjects_ranked", subject_count=len(ranked))
        return ranked


_default_engine = ScorecardEngine()


def compute_metrics(
    claims: Optional[Iterable[Any]],
    now: Optional[datetime] = None,
    comparison_scores: Optional[Iterable[Optional[float]]] = None,
) -> ESGMetrics:
    """Compute ESGMetrics with the default scoring configuration."""
    return _default_engine.compute_metrics(claims, now=now, comparison_scores=comparison_scores)


def compute_validation_metrics(claims: Optional[Iterable[Any]]) -> ValidationMetrics:
    """Compute ValidationMetrics with the default scoring configuration."""
    return _default_engine.compute_validation_metrics(claims)
