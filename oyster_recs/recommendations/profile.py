from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .models import (
    DIMENSIONS,
    POSITIVE_RATINGS,
    AttributeVector,
    FlavorRange,
    Rating,
    Review,
    TasteProfile,
)
from .store import ReviewStore

logger = logging.getLogger(__name__)

# Influence of a new positive review on an existing baseline.
BASELINE_REVIEW_WEIGHTS: dict[Rating, float] = {
    Rating.LOVE_IT: 0.4,
    Rating.LIKE_IT: 0.3,
}
MIN_REVIEWS_FOR_RANGES = 5


class ProfileBuilder:
    """Derives a user's preferred taste vector from the store."""

    def __init__(self, store: ReviewStore, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self._store = store
        self._config = config

    def build_profile(self, user_id: str) -> AttributeVector | None:
        """
        Return the user's preferred attributes, or ``None`` when there is no signal.

        An explicit baseline always wins. Otherwise the vectors of the user's
        positive reviews are averaged, weighted by each review's weighted score
        (times ``favorite_weight`` for favorited oysters). A review without its
        own attributes contributes the oyster's taste vector.
        """
        profile = self.describe(user_id)
        return profile.vector if profile else None

    def describe(self, user_id: str) -> TasteProfile | None:
        user = self._store.get_user(user_id)
        positive = self._positive_reviews(user_id)

        if user is not None and user.baseline is not None:
            return TasteProfile(
                vector=user.baseline,
                source="baseline",
                positive_reviews=len(positive),
                ranges=flavor_ranges([v for v, _ in self._weighted_vectors(user_id, positive)]),
            )

        if not positive:
            logger.info("No baseline or positive reviews for user %s", user_id)
            return None

        pairs = self._weighted_vectors(user_id, positive)
        if not pairs:
            return None
        vectors = np.vstack([v.as_array() for v, _ in pairs])
        weights = np.array([w for _, w in pairs], dtype=float)
        if weights.sum() > 0:
            mean = np.average(vectors, axis=0, weights=weights)
        else:
            mean = vectors.mean(axis=0)

        return TasteProfile(
            vector=AttributeVector.from_array(mean),
            source="reviews",
            positive_reviews=len(positive),
            ranges=flavor_ranges([v for v, _ in pairs]),
        )

    def _positive_reviews(self, user_id: str) -> list[Review]:
        return [
            r for r in self._store.get_reviews_for_user(user_id)
            if r.rating in POSITIVE_RATINGS
        ]

    def _weighted_vectors(
        self, user_id: str, reviews: list[Review]
    ) -> list[tuple[AttributeVector, float]]:
        if not reviews:
            return []
        oysters = {o.id: o for o in self._store.get_oysters(r.oyster_id for r in reviews)}
        favorites = self._store.get_favorite_oyster_ids(user_id)

        pairs: list[tuple[AttributeVector, float]] = []
        for review in reviews:
            vector = review.attributes
            if vector is None:
                oyster = oysters.get(review.oyster_id)
                if oyster is None:
                    continue
                vector = oyster.taste_vector
            weight = review.weighted_score
            if review.oyster_id in favorites:
                weight *= self._config.favorite_weight
            pairs.append((vector, weight))
        return pairs


def blend_baseline(
    current: AttributeVector | None,
    rating: Rating,
    attributes: AttributeVector,
) -> AttributeVector | None:
    """Move a baseline toward a newly reviewed oyster.

    Helper for the store's review-write path; the read-only engine never
    calls it. Only positive ratings shift the baseline. Without a current
    baseline the review's attributes become the new one. The writer
    persists the result.
    """
    weight = BASELINE_REVIEW_WEIGHTS.get(rating)
    if weight is None:
        return current
    if current is None:
        return attributes
    blended = current.as_array() * (1 - weight) + attributes.as_array() * weight
    return AttributeVector.from_array(blended)


def flavor_ranges(vectors: Sequence[AttributeVector]) -> dict[str, FlavorRange] | None:
    """Per-dimension min/max/median, once enough positive reviews exist."""
    if len(vectors) < MIN_REVIEWS_FOR_RANGES:
        return None
    matrix = np.vstack([v.as_array() for v in vectors])
    return {
        dim: FlavorRange(
            min=float(matrix[:, i].min()),
            max=float(matrix[:, i].max()),
            median=float(np.median(matrix[:, i])),
        )
        for i, dim in enumerate(DIMENSIONS)
    }
