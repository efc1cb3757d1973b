"""
Custom Exceptions - ESG Scorecard Engine
esg_scorecard/core/exceptions.py

Only genuinely invalid call patterns raise. Sparse data (empty claim sets,
missing optional fields) resolves to default values instead, and consistency
problems are reported as warnings on the result.
"""


class ScoringException(Exception):
    """Base exception for scorecard computations."""

    pass


class InvalidClaimCollectionError(ScoringException, TypeError):
    """Something other than a collection of claims was passed in."""

    def __init__(self, received: object):
        self.received_type = type(received).__name__
        super().__init__(
            f"Expected a collection of claims, got {self.received_type}"
        )


class InvalidClaimError(ScoringException, ValueError):
    """A claim item could not be read as a Claim."""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Claim at position {index} is invalid: {reason}")
