# tests/conftest.py

"""
Pytest Fixtures - Shared claim data and a fixed reference time

All scorecard computations take "now" explicitly; tests pin it to NOW so
recency weights are exact (claims created at NOW weigh exactly 1).
"""

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from esg_scorecard.models.claim import Claim, Validator

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

_ids = count(1)


def build_claim(
    aspect="esg-overall",
    score=0.0,
    confidence=1.0,
    days_old=0,
    subject="Acme Corp (ACME)",
    stars=None,
    validators=(),
    **extra,
) -> Claim:
    """Build a rated claim created days_old days before NOW."""
    return Claim(
        id=extra.pop("id", next(_ids)),
        subject=subject,
        claim="rated",
        aspect=aspect,
        score=score,
        stars=stars,
        confidence=confidence,
        created_at=NOW - timedelta(days=days_old),
        validators=tuple(validators),
        **extra,
    )


def build_validator(rating=4, verified=True, name="Jane Analyst", role="ESG Analyst", **extra) -> Validator:
    return Validator(
        name=name,
        role=role,
        organization=extra.pop("organization", "Green Ratings Ltd"),
        rating=rating,
        statement=extra.pop("statement", "Consistent with published reports."),
        verified=verified,
    )


# =============================================================================
# TIME FIXTURES
# =============================================================================

@pytest.fixture
def now():
    """Fixed reference time for recency weighting."""
    return NOW


# =============================================================================
# CLAIM FIXTURES
# =============================================================================

@pytest.fixture
def make_claim():
    """Factory for claims relative to NOW."""
    return build_claim


@pytest.fixture
def make_validator():
    """Factory for validator sub-records."""
    return build_validator


@pytest.fixture
def pillar_claims():
    """One fresh, fully confident claim per pillar."""
    return [
        build_claim(aspect="esg-climate", score=0.2),
        build_claim(aspect="labor practices", score=0.6),
        build_claim(aspect="board governance", score=-0.2),
    ]


@pytest.fixture
def rated_claims():
    """Claims whose own stars and validators give ratings [5, 4, 2, 1, 1]."""
    return [
        build_claim(
            aspect="climate",
            score=0.5,
            stars=5,
            days_old=10,
            author="Maria Lopez",
            curator="Sustain Index",
            validators=[build_validator(rating=4, verified=True)],
        ),
        build_claim(
            aspect="governance",
            score=-0.4,
            stars=2,
            days_old=30,
            validators=[
                build_validator(rating=1, verified=False, name="Tom Reed", role="Corporate Ethics"),
                build_validator(rating=1, verified=True, name="Ana Diaz", role="Unlisted Role"),
            ],
        ),
    ]
