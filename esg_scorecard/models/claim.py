from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from esg_scorecard.core.exceptions import InvalidClaimCollectionError, InvalidClaimError


class Validator(BaseModel):
    """
    A community validation attached to a claim.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name of the validator")
    role: str = Field(default="", description="Professional role, e.g. 'ESG Analyst'")
    organization: str = Field(default="", description="Validator's organization")
    rating: float = Field(..., ge=0, le=5, description="Rating on a 0-5 scale")
    statement: str = Field(default="", description="Free-text justification")
    verified: bool = Field(default=False, description="Identity has been verified")

    @field_validator("organization", "statement", "role", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


class Claim(BaseModel):
    """
    A single third-party assessment record about an organization.

    Claims arrive already filtered by the data-access layer; only the fields
    the engine reads are modelled. Unknown wire fields are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: Union[int, str] = Field(..., description="Claim identifier")
    subject: str = Field(..., min_length=1, description="Organization key (name or ISIN)")
    claim: str = Field(..., min_length=1, description="Claim type, e.g. 'rated'")
    aspect: Optional[str] = Field(
        default=None,
        description="Free-text category label, e.g. 'esg-climate'",
    )
    score: Optional[float] = Field(default=None, ge=-1, le=1)
    stars: Optional[float] = Field(default=None, ge=0, le=5)
    confidence: Optional[float] = Field(default=None, ge=0, le=1)
    created_at: datetime = Field(..., alias="createdAt")
    statement: Optional[str] = None
    source_uri: Optional[str] = Field(default=None, alias="sourceURI")
    author: Optional[str] = None
    curator: Optional[str] = None
    validators: Tuple[Validator, ...] = Field(default=())

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are read as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("validators", mode="before")
    @classmethod
    def none_to_empty_validators(cls, v):
        return () if v is None else v

    @property
    def is_scorable(self) -> bool:
        """Carries a score and a positive confidence."""
        return self.score is not None and self.confidence is not None and self.confidence > 0


def parse_claims(claims: Any) -> List[Claim]:
    """
    Read a claim collection into a list of Claim models.

    Args:
        claims: None, or an iterable of Claim instances and/or mappings
                (decoded JSON using either snake_case or camelCase keys).

    Returns:
        A new list; the input collection is not modified.

    Raises:
        InvalidClaimCollectionError: claims is not a collection
                                     (e.g. a string, mapping or number).
        InvalidClaimError: an item is neither a Claim nor a valid mapping.
    """
    if claims is None:
        return []
    if isinstance(claims, (str, bytes, Mapping)) or not isinstance(claims, Iterable):
        raise InvalidClaimCollectionError(claims)

    parsed: List[Claim] = []
    for index, item in enumerate(claims):
        if isinstance(item, Claim):
            parsed.append(item)
        elif isinstance(item, Mapping):
            try:
                parsed.append(Claim.model_validate(dict(item)))
            except ValidationError as exc:
                raise InvalidClaimError(index, str(exc)) from exc
        else:
            raise InvalidClaimError(index, f"unsupported type {type(item).__name__}")
    return parsed
