"""
Core Package - ESG Scorecard Engine
esg_scorecard/core/__init__.py

Core infrastructure: exceptions, logging.
"""

from esg_scorecard.core.exceptions import (
    InvalidClaimCollectionError,
    InvalidClaimError,
    ScoringException,
)
from esg_scorecard.core.logging import configure_logging, get_logger

__all__ = [
    # Exceptions
    "InvalidClaimCollectionError",
    "InvalidClaimError",
    "ScoringException",
    # Logging
    "configure_logging",
    "get_logger",
]
