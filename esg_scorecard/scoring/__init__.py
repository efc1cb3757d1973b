"""
scoring/: ESG Scorecard Engine

Modules:
    utils.py                  - Decimal utilities
    pillar_classifier.py      - Aspect label → ESG pillars, general-claim fallback
    weighted_aggregator.py    - Confidence × recency weighted scores
    score_normalizer.py       - Percentage, star bands, letter grades
    percentile_ranker.py      - Relative standing in a comparison population
    validation_aggregator.py  - Endorsement / consensus / verification statistics
    metrics_validator.py      - Closing consistency checks
    scorecard_engine.py       - Full pipeline and public entry points
"""
