from __future__ import annotations

from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class Rating(str, Enum):
    LOVE_IT = "LOVE_IT"
    LIKE_IT = "LIKE_IT"
    MEH = "MEH"
    WHATEVER = "WHATEVER"


# Numeric scale used for all vector math; must stay total over ``Rating``.
RATING_SCORES: dict[Rating, int] = {
    Rating.LOVE_IT: 4,
    Rating.LIKE_IT: 3,
    Rating.MEH: 2,
    Rating.WHATEVER: 1,
}
MIN_RATING_SCORE = min(RATING_SCORES.values())
MAX_RATING_SCORE = max(RATING_SCORES.values())

POSITIVE_RATINGS: frozenset[Rating] = frozenset({Rating.LOVE_IT, Rating.LIKE_IT})


class RecommendationMode(str, Enum):
    attribute = "attribute"
    collaborative = "collaborative"
    hybrid = "hybrid"


class AttributeVector(BaseModel):
    model_config = ConfigDict(frozen=True)

    size: float = Field(..., ge=1.0, le=10.0)
    body: float = Field(..., ge=1.0, le=10.0)
    sweet_brininess: float = Field(..., ge=1.0, le=10.0)
    flavorfulness: float = Field(..., ge=1.0, le=10.0)
    creaminess: float = Field(..., ge=1.0, le=10.0)

    def as_array(self) -> np.ndarray:
        return np.array([getattr(self, dim) for dim in DIMENSIONS], dtype=float)

    @classmethod
    def from_array(cls, values: np.ndarray) -> AttributeVector:
        clipped = np.clip(values, 1.0, 10.0)
        return cls(**{dim: float(v) for dim, v in zip(DIMENSIONS, clipped)})


DIMENSIONS: tuple[str, ...] = (
    "size",
    "body",
    "sweet_brininess",
    "flavorfulness",
    "creaminess",
)

# Wording used in match reasons.
DIMENSION_LABELS: dict[str, str] = {
    "size": "size",
    "body": "body",
    "sweet_brininess": "brininess",
    "flavorfulness": "flavor",
    "creaminess": "creaminess",
}


class Oyster(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    species: str = ""
    origin: str = ""
    attributes: AttributeVector
    community_attributes: AttributeVector | None = None
    overall_score: float = Field(default=0.0, ge=0.0, le=10.0)
    total_reviews: int = Field(default=0, ge=0)

    @property
    def taste_vector(self) -> AttributeVector:
        """Community averages when reviewers have weighed in, else seeded values."""
        return self.community_attributes or self.attributes


class Review(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    oyster_id: str
    rating: Rating
    attributes: AttributeVector | None = None
    weighted_score: float = Field(default=1.0, ge=0.0)

    @property
    def numeric_rating(self) -> int:
        return RATING_SCORES[self.rating]


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    baseline: AttributeVector | None = None


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    oyster: Oyster
    score: float = Field(..., ge=0.0, le=100.0)
    match_reason: str | None = None
    attribute_score: float | None = None
    collaborative_score: float | None = None
    contributing_users: int | None = None

    @property
    def oyster_id(self) -> str:
        return self.oyster.id


class SimilarUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    similarity: float = Field(..., ge=0.0, le=1.0)
    shared_oysters: int


class FlavorRange(BaseModel):
    min: float
    max: float
    median: float


class TasteProfile(BaseModel):
    vector: AttributeVector
    source: str
    positive_reviews: int
    ranges: dict[str, FlavorRange] | None = None


class RecommendationBatch(BaseModel):
    mode: RecommendationMode
    results: list[RecommendationResult] = Field(default_factory=list)
    reason: str | None = None


class SimilarUsersBatch(BaseModel):
    results: list[SimilarUser] = Field(default_factory=list)
    reason: str | None = None


# ── Response envelopes ──────────────────────────────────────────────────


class RecommendationMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int
    has_recommendations: bool = Field(..., alias="hasRecommendations")
    type: RecommendationMode
    reason: str | None = None


class RecommendationsResponse(BaseModel):
    success: bool = True
    data: list[RecommendationResult]
    meta: RecommendationMeta


class SimilarUsersMeta(BaseModel):
    count: int
    reason: str | None = None


class SimilarUsersResponse(BaseModel):
    success: bool = True
    data: list[SimilarUser]
    meta: SimilarUsersMeta


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
