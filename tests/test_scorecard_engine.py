# tests/test_scorecard_engine.py
"""
Test Scorecard Engine
End-to-end composition of pillar, overall, ranking and validation metrics
"""

from decimal import Decimal

import pytest

from esg_scorecard import compute_metrics, compute_validation_metrics
from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.core.exceptions import (
    InvalidClaimCollectionError,
    InvalidClaimError,
    ScoringException,
)
from esg_scorecard.models.enumerations import Pillar
from esg_scorecard.scoring.scorecard_engine import ScorecardEngine


@pytest.fixture
def engine():
    return ScorecardEngine()


# =============================================================================
# SINGLE PILLAR
# =============================================================================

class TestSingleEnvironmentalClaim:
    """One climate claim: score 0.2, confidence 0.8, created now."""

    @pytest.fixture
    def metrics(self, engine, make_claim, now):
        return engine.compute_metrics([make_claim(aspect="climate", score=0.2, confidence=0.8)], now=now)

    def test_pillars(self, metrics):
        assert metrics.environmental_score == Decimal("60")
        assert metrics.social_score == Decimal("0")
        assert metrics.governance_score == Decimal("0")

    def test_overall(self, metrics):
        assert metrics.overall_percentage == Decimal("24")
        assert metrics.overall_score == Decimal("-0.52")
        assert metrics.overall_stars == 1
        assert metrics.overall_grade == "F"

    def test_confidence(self, metrics):
        assert metrics.confidence_level == Decimal("0.8")
        assert metrics.confidence_label == "High"

    def test_percentile_against_own_scores(self, metrics):
        # -0.52 is below the claim's own 0.2
        assert metrics.percentile_rank == 0

    def test_last_updated(self, metrics, now):
        assert metrics.last_updated == now

    @pytest.mark.parametrize("aspect", ["esg-climate", "ESG-Carbon", "esg-environmental"])
    def test_esg_prefixed_label_stays_single_pillar(self, engine, make_claim, now, aspect):
        metrics = engine.compute_metrics([make_claim(aspect=aspect, score=0.2, confidence=0.8)], now=now)

        assert metrics.environmental_score == Decimal("60")
        assert metrics.social_score == Decimal("0")
        assert metrics.governance_score == Decimal("0")
        assert metrics.overall_percentage == Decimal("24")


class TestAllPillars:

    def test_weighted_overall(self, engine, pillar_claims, now):
        metrics = engine.compute_metrics(pillar_claims, now=now)

        assert metrics.environmental_score == Decimal("60")
        assert metrics.social_score == Decimal("80")
        assert metrics.governance_score == Decimal("40")
        # 0.4 × 60 + 0.3 × 80 + 0.3 × 40
        assert metrics.overall_percentage == Decimal("60")
        assert metrics.overall_score == Decimal("0.2")
        assert metrics.overall_stars == 3
        assert metrics.overall_grade == "C+"

    def test_breakdown(self, engine, pillar_claims, now):
        pillars = engine.pillar_breakdown(pillar_claims, now=now)

        env = pillars[Pillar.ENVIRONMENTAL]
        assert env.claim_count == 1
        assert env.weighted_score == Decimal("0.2")
        assert env.average_score == Decimal("0.2")
        assert env.weight == Decimal("0.40")
        assert env.weighted_contribution == Decimal("24")
        assert env.used_fallback is False
        assert "climate" in env.keywords
        assert sum(b.weighted_contribution for b in pillars.values()) == Decimal("60")

    def test_claim_in_two_pillars(self, engine, make_claim, now):
        metrics = engine.compute_metrics([make_claim(aspect="board diversity", score=0.5)], now=now)

        assert metrics.social_score == Decimal("75")
        assert metrics.governance_score == Decimal("75")
        assert metrics.environmental_score == Decimal("0")


class TestGeneralFallback:

    def test_overall_claims_score_every_pillar(self, engine, make_claim, now):
        result = engine.score([make_claim(aspect="esg-overall", score=0.4)], now=now)

        for pillar in Pillar:
            assert result.pillars[pillar].used_fallback is True
            assert result.pillars[pillar].percentage == Decimal("70")
        assert result.metrics.overall_percentage == Decimal("70")
        assert result.metrics.overall_grade == "B"

    def test_specific_claims_take_precedence(self, engine, make_claim, now):
        claims = [
            make_claim(aspect="general", score=1.0),
            make_claim(aspect="carbon emissions", score=-1.0),
        ]
        pillars = engine.pillar_breakdown(claims, now=now)

        assert pillars[Pillar.ENVIRONMENTAL].percentage == Decimal("0")
        assert pillars[Pillar.ENVIRONMENTAL].used_fallback is False
        assert pillars[Pillar.SOCIAL].percentage == Decimal("100")
        assert pillars[Pillar.SOCIAL].used_fallback is True

    def test_unclassified_claims_ignored(self, engine, make_claim, now):
        metrics = engine.compute_metrics([make_claim(aspect="product quality", score=0.9)], now=now)

        assert metrics.overall_percentage == Decimal("0")
        assert metrics.overall_stars == 1
        assert metrics.overall_grade == "F"


# =============================================================================
# SPARSE AND DEFAULT INPUT
# =============================================================================

class TestDefaults:

    @pytest.mark.parametrize("claims", [None, [], ()])
    def test_empty_input(self, engine, claims, now):
        metrics = engine.compute_metrics(claims, now=now)

        assert metrics.overall_score == Decimal("0")
        assert metrics.overall_percentage == Decimal("0")
        assert metrics.overall_stars == 0
        assert metrics.overall_grade == "N/A"
        assert metrics.confidence_level == Decimal("0")
        assert metrics.confidence_label == "Low"
        assert metrics.percentile_rank == 50
        assert metrics.total_validations == 0

    def test_no_scorable_claims(self, engine, make_claim, now):
        claims = [
            make_claim(score=None, stars=4),
            make_claim(score=0.5, confidence=0),
        ]
        metrics = engine.compute_metrics(claims, now=now)

        assert metrics.overall_stars == 0
        assert metrics.overall_grade == "N/A"
        # ratings still count
        assert metrics.total_validations == 1
        assert metrics.endorsements == 1

    def test_last_updated_defaults_to_clock(self, engine, make_claim):
        metrics = engine.compute_metrics([make_claim(score=0.1)])
        assert metrics.last_updated.tzinfo is not None

    def test_empty_result_is_consistent(self, engine, now):
        assert engine.score([], now=now).is_consistent


# =============================================================================
# INPUT HANDLING
# =============================================================================

class TestInputHandling:

    @pytest.mark.parametrize("bad", ["claims", {"id": 1}, 42, b"raw"])
    def test_non_collection_rejected(self, engine, bad):
        with pytest.raises(InvalidClaimCollectionError) as exc_info:
            engine.compute_metrics(bad)
        assert isinstance(exc_info.value, TypeError)
        assert isinstance(exc_info.value, ScoringException)

    def test_unsupported_item_rejected(self, engine):
        with pytest.raises(InvalidClaimError) as exc_info:
            engine.compute_metrics([42])
        assert exc_info.value.index == 0

    def test_invalid_mapping_rejected(self, engine, make_claim):
        bad = {"id": 2, "subject": "Acme", "claim": "rated", "score": 3.0, "createdAt": "2025-01-01T00:00:00Z"}
        with pytest.raises(InvalidClaimError) as exc_info:
            engine.compute_metrics([make_claim(), bad])
        assert exc_info.value.index == 1
        assert isinstance(exc_info.value, ValueError)

    def test_wire_mapping_accepted(self, engine, now):
        record = {
            "id": "c-17",
            "subject": "Globex (GBX)",
            "claim": "rated",
            "aspect": "social",
            "score": 0.5,
            "confidence": 1,
            "createdAt": "2025-06-01T12:00:00Z",
            "sourceURI": "https://example.org/report.pdf",
            "issuerId": 99,
        }
        metrics = engine.compute_metrics([record], now=now)

        assert metrics.social_score == Decimal("75")
        assert metrics.overall_percentage == Decimal("22.5")
        assert metrics.overall_score == Decimal("-0.55")

    def test_generator_input(self, engine, pillar_claims, now):
        metrics = engine.compute_metrics((c for c in pillar_claims), now=now)
        assert metrics.overall_percentage == Decimal("60")


# =============================================================================
# VALIDATION AND RANKING
# =============================================================================

class TestValidationEmbedded:

    def test_metrics_carry_validation_totals(self, engine, rated_claims, now):
        metrics = engine.compute_metrics(rated_claims, now=now)

        assert metrics.total_validations == 5
        assert metrics.endorsements == 2
        assert metrics.rejections == 3
        assert metrics.average_rating == Decimal("2.6")
        assert metrics.endorsement_rate == Decimal("40")
        assert metrics.consensus_percentage == Decimal("20")

    def test_score_returns_validation(self, engine, rated_claims, now):
        result = engine.score(rated_claims, now=now)

        assert result.validation.verified_rate == Decimal("66.67")
        assert len(result.validation.validation_history) == 5
        assert result.is_consistent

    def test_module_level_functions(self, rated_claims, now):
        assert compute_metrics(rated_claims, now=now).total_validations == 5
        assert compute_validation_metrics(rated_claims).validator_count == 3

    def test_validation_metrics_of_nothing(self):
        result = compute_validation_metrics([])

        assert result.total_validations == 0
        assert result.average_rating == Decimal("0")
        assert result.verified_rate == Decimal("100")


class TestPercentile:

    def test_explicit_comparison_scores(self, engine, pillar_claims, now):
        # overall raw score is 0.2
        metrics = engine.compute_metrics(pillar_claims, now=now, comparison_scores=[-0.5, 0.0, 0.2, 0.9])
        assert metrics.percentile_rank == 50

    def test_empty_comparison_population(self, engine, pillar_claims, now):
        metrics = engine.compute_metrics(pillar_claims, now=now, comparison_scores=[])
        assert metrics.percentile_rank == 50


class TestRankSubjects:

    def test_subjects_ranked(self, engine, make_claim, now):
        claims = [
            make_claim(subject="Alpha", aspect="climate", score=0.6),
            make_claim(subject="Beta", aspect="climate", score=-0.2),
            make_claim(subject="Gamma", aspect="climate", score=None, stars=4),
            make_claim(subject="Alpha", aspect="climate", score=0.6),
        ]
        ranked = engine.rank_subjects(claims, now=now)

        assert [s.subject for s in ranked] == ["Alpha", "Beta", "Gamma"]
        alpha, beta, gamma = ranked
        assert alpha.claim_count == 2
        assert alpha.result.metrics.overall_percentage == Decimal("32")
        assert alpha.result.metrics.percentile_rank == 50
        assert beta.result.metrics.percentile_rank == 0
        assert gamma.result.metrics.percentile_rank == 50
        assert gamma.result.metrics.overall_grade == "N/A"

    def test_empty(self, engine):
        assert engine.rank_subjects(None) == []


class TestAlternateConfig:

    def test_weights(self, make_claim, now):
        config = ScoringConfig(pillar_weights={
            Pillar.ENVIRONMENTAL: Decimal("0.2"),
            Pillar.SOCIAL: Decimal("0.2"),
            Pillar.GOVERNANCE: Decimal("0.6"),
        })
        metrics = ScorecardEngine(config).compute_metrics(
            [make_claim(aspect="climate", score=0.2)], now=now
        )
        assert metrics.overall_percentage == Decimal("12")

    def test_no_shared_state(self, engine, pillar_claims, rated_claims, now):
        first = engine.compute_metrics(pillar_claims, now=now)
        engine.compute_metrics(rated_claims, now=now)
        assert engine.compute_metrics(pillar_claims, now=now) == first


class TestSerialization:

    def test_as_dict(self, engine, pillar_claims, now):
        data = engine.compute_metrics(pillar_claims, now=now).as_dict()

        assert data["overall_percentage"] == 60.0
        assert data["overall_grade"] == "C+"
        assert data["last_updated"] == now.isoformat()


class TestSharedDefaultConfig:

    def test_default_weights_cannot_be_rewritten(self, make_claim, now):
        with pytest.raises(TypeError):
            DEFAULT_SCORING_CONFIG.pillar_weights[Pillar.ENVIRONMENTAL] = Decimal("5")

        metrics = compute_metrics([make_claim(aspect="climate", score=0.2)], now=now)
        assert metrics.overall_percentage == Decimal("24")
