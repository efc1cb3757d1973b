"""Scoring configuration and application settings with validation."""
from decimal import Decimal
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Literal, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from esg_scorecard.models.enumerations import Pillar


# =============================================================================
# DEFAULT SCORING TABLES
# =============================================================================
# Overall = 0.4 × Environmental + 0.3 × Social + 0.3 × Governance
# Bands are (inclusive lower bound, value), highest first; the last band
# must start at 0 so every percentage in [0, 100] lands in exactly one band.
# =============================================================================

PILLAR_WEIGHTS: Dict[Pillar, Decimal] = {
    Pillar.ENVIRONMENTAL: Decimal("0.40"),
    Pillar.SOCIAL: Decimal("0.30"),
    Pillar.GOVERNANCE: Decimal("0.30"),
}

PILLAR_KEYWORDS: Dict[Pillar, Tuple[str, ...]] = {
    Pillar.ENVIRONMENTAL: (
        "environmental", "climate", "sustainability", "carbon",
        "energy", "renewable", "emissions", "green",
    ),
    Pillar.SOCIAL: (
        "social", "labor", "community", "diversity",
        "human rights", "employee", "workplace", "safety",
    ),
    Pillar.GOVERNANCE: (
        "governance", "leadership", "transparency", "ethics",
        "compliance", "board", "audit", "risk",
    ),
}

GENERAL_KEYWORDS: Tuple[str, ...] = ("esg", "overall", "general")

STAR_BANDS: Tuple[Tuple[Decimal, int], ...] = (
    (Decimal("90"), 5),
    (Decimal("75"), 4),
    (Decimal("60"), 3),
    (Decimal("40"), 2),
    (Decimal("0"), 1),
)

GRADE_BANDS: Tuple[Tuple[Decimal, str], ...] = (
    (Decimal("90"), "A+"),
    (Decimal("85"), "A"),
    (Decimal("80"), "A-"),
    (Decimal("75"), "B+"),
    (Decimal("70"), "B"),
    (Decimal("65"), "B-"),
    (Decimal("60"), "C+"),
    (Decimal("55"), "C"),
    (Decimal("50"), "C-"),
    (Decimal("45"), "D+"),
    (Decimal("40"), "D"),
    (Decimal("0"), "F"),
)

CONFIDENCE_LABELS: Tuple[Tuple[Decimal, str], ...] = (
    (Decimal("0.9"), "Very High"),
    (Decimal("0.8"), "High"),
    (Decimal("0.7"), "Medium"),
    (Decimal("0.6"), "Moderate"),
    (Decimal("0"), "Low"),
)


def _check_bands(name: str, bands: Tuple[Tuple[Decimal, object], ...]) -> None:
    """Bands must be non-empty, strictly descending and end at 0."""
    if not bands:
        raise ValueError(f"{name} must define at least one band")
    bounds = [bound for bound, _ in bands]
    for upper, lower in zip(bounds, bounds[1:]):
        if lower >= upper:
            raise ValueError(f"{name} lower bounds must be strictly descending, got {bounds}")
    if bounds[-1] != 0:
        raise ValueError(f"{name} must end with a band starting at 0, got {bounds[-1]}")


class ScoringConfig(BaseModel):
    """
    Immutable policy for one scorecard computation.

    Every weight, decay constant and threshold the engine uses lives here so
    alternate policies can be passed in without touching the calculators.
    """

    model_config = ConfigDict(frozen=True)

    # Pillar weighting
    pillar_weights: Mapping[Pillar, Decimal] = Field(
        default_factory=lambda: dict(PILLAR_WEIGHTS), validate_default=True
    )

    # Recency decay: weight = exp(-days / recency_decay_days), half-life ≈ 125 days
    recency_decay_days: Decimal = Field(default=Decimal("180"), gt=0)
    default_confidence: Decimal = Field(default=Decimal("0.5"), ge=0, le=1)

    # Classification
    pillar_keywords: Mapping[Pillar, Tuple[str, ...]] = Field(
        default_factory=lambda: dict(PILLAR_KEYWORDS), validate_default=True
    )
    general_keywords: Tuple[str, ...] = GENERAL_KEYWORDS

    # Normalization bands
    star_bands: Tuple[Tuple[Decimal, int], ...] = STAR_BANDS
    grade_bands: Tuple[Tuple[Decimal, str], ...] = GRADE_BANDS
    confidence_labels: Tuple[Tuple[Decimal, str], ...] = CONFIDENCE_LABELS

    # Validation statistics
    endorsement_min_rating: Decimal = Field(default=Decimal("4"), ge=0, le=5)
    rejection_max_rating: Decimal = Field(default=Decimal("2"), ge=0, le=5)
    consensus_tolerance: Decimal = Field(default=Decimal("1"), ge=0)
    verified_rate_without_validators: Decimal = Field(default=Decimal("100"), ge=0, le=100)

    # Ranking
    default_percentile: int = Field(default=50, ge=0, le=100)

    # Consistency checks (percentage points)
    overall_tolerance: Decimal = Field(default=Decimal("0.5"), ge=0)
    endorsement_rate_tolerance: Decimal = Field(default=Decimal("0.1"), ge=0)

    @field_validator("pillar_weights", "pillar_keywords")
    @classmethod
    def freeze_mapping(cls, v):
        """Pillar tables are read-only once validated."""
        return MappingProxyType(dict(v))

    @field_serializer("pillar_weights", "pillar_keywords")
    def serialize_mapping(self, v):
        return dict(v)

    @model_validator(mode="after")
    def validate_pillar_weights(self):
        """Validate every pillar has a weight and the weights sum to 1.0."""
        missing = [p.value for p in Pillar if p not in self.pillar_weights]
        if missing:
            raise ValueError(f"Missing pillar weights: {missing}")
        if any(w < 0 for w in self.pillar_weights.values()):
            raise ValueError("Pillar weights must be non-negative")
        total = sum(self.pillar_weights.values())
        if abs(total - Decimal("1")) > Decimal("0.001"):
            raise ValueError(f"Pillar weights must sum to 1.0, got {total}")
        return self

    @model_validator(mode="after")
    def validate_keywords(self):
        """Validate every pillar has at least one keyword."""
        for pillar in Pillar:
            if not self.pillar_keywords.get(pillar):
                raise ValueError(f"Pillar {pillar.value} needs at least one keyword")
        return self

    @model_validator(mode="after")
    def validate_bands(self):
        """Validate star, grade and confidence bands cover their whole axis."""
        _check_bands("star_bands", self.star_bands)
        _check_bands("grade_bands", self.grade_bands)
        _check_bands("confidence_labels", self.confidence_labels)
        for _, stars in self.star_bands:
            if not 0 <= stars <= 5:
                raise ValueError(f"Star values must be in [0, 5], got {stars}")
        return self

    @model_validator(mode="after")
    def validate_rating_thresholds(self):
        """Endorsement and rejection buckets must not overlap."""
        if self.rejection_max_rating >= self.endorsement_min_rating:
            raise ValueError(
                "rejection_max_rating must be below endorsement_min_rating, got "
                f"{self.rejection_max_rating} >= {self.endorsement_min_rating}"
            )
        return self


DEFAULT_SCORING_CONFIG = ScoringConfig()


class Settings(BaseSettings):
    """
    Logging settings (LOG_LEVEL, LOG_FORMAT) read from the environment or .env.

    Only configure_logging() reads these. Scoring behaviour is set solely by
    the ScoringConfig passed to the engine, never by the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
