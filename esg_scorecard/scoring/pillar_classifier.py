"""
Pillar Classifier
esg_scorecard/scoring/pillar_classifier.py

Tags claims with ESG pillars from their free-text aspect label.

Matching:
    A claim belongs to a pillar when any of the pillar's keywords is a
    case-insensitive substring of its aspect. A claim may match several
    pillars or none.

Fallback:
    A pillar with no matching claims is scored from the general/overall
    claims (aspect containing "esg", "overall" or "general" and matching no
    pillar keyword). A pillar with neither is left empty and scores exactly 0.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple

import structlog

from esg_scorecard.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from esg_scorecard.models.claim import Claim
from esg_scorecard.models.enumerations import Pillar

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PillarSelection:
    """Claims chosen to score one pillar."""
    pillar: Pillar
    claims: Tuple[Claim, ...]
    used_fallback: bool

    @property
    def is_empty(self) -> bool:
        return not self.claims


def _matches(label: Optional[str], keywords: Sequence[str]) -> bool:
    if not label:
        return False
    label_lower = label.lower()
    return any(keyword.lower() in label_lower for keyword in keywords)


class PillarClassifier:
    """Classify claim aspects into pillars, with general-claim fallback."""

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG):
        self.config = config

    def keywords_for(self, pillar: Pillar) -> Tuple[str, ...]:
        return tuple(self.config.pillar_keywords[pillar])

    def classify(self, aspect: Optional[str]) -> FrozenSet[Pillar]:
        """
        Return every pillar whose keyword list matches the aspect label.

        Examples:
            >>> PillarClassifier().classify("esg-climate")
            frozenset({<Pillar.ENVIRONMENTAL: 'environmental'>})
            >>> sorted(p.value for p in PillarClassifier().classify("board diversity"))
            ['governance', 'social']
        """
        return frozenset(
            pillar for pillar in Pillar
            if _matches(aspect, self.config.pillar_keywords[pillar])
        )

    def is_general(self, aspect: Optional[str]) -> bool:
        """
        True for general/overall assessments usable as a pillar fallback.

        A label that names a pillar is never general, so "esg-climate"
        stays an Environmental claim even though it contains "esg".

        Examples:
            >>> PillarClassifier().is_general("esg-overall")
            True
            >>> PillarClassifier().is_general("esg-climate")
            False
        """
        return _matches(aspect, self.config.general_keywords) and not self.classify(aspect)

    def select(self, claims: Sequence[Claim], pillar: Pillar) -> PillarSelection:
        """
        Pick the claims that score a pillar.

        Args:
            claims: Scorable claims (score present, confidence > 0).
            pillar: Pillar to select for.

        Returns:
            PillarSelection with the pillar's own claims, or the general
            claims flagged used_fallback=True, or no claims at all.
        """
        specific = [c for c in claims if pillar in self.classify(c.aspect)]
        if specific:
            return PillarSelection(pillar=pillar, claims=tuple(specific), used_fallback=False)

        general: List[Claim] = [c for c in claims if self.is_general(c.aspect)]
        if general:
            logger.debug(
                "pillar_fallback_used",
                pillar=pillar.value,
                general_claim_count=len(general),
            )
        return PillarSelection(pillar=pillar, claims=tuple(general), used_fallback=bool(general))
