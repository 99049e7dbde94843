from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity

from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .matrix import RatingMatrixView
from .models import MAX_RATING_SCORE, MIN_RATING_SCORE, Oyster, RecommendationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Neighbor:
    user_id: str
    similarity: float
    shared_oysters: int
    ratings: dict[str, int]


def shared_cosine(own: dict[str, int], other: dict[str, int]) -> tuple[float, int]:
    """Cosine similarity over the oysters both users rated, and how many there are."""
    shared = sorted(own.keys() & other.keys())
    if not shared:
        return 0.0, 0
    a = np.array([[own[o] for o in shared]], dtype=float)
    b = np.array([[other[o] for o in shared]], dtype=float)
    return float(np.clip(cosine_similarity(a, b)[0, 0], -1.0, 1.0)), len(shared)


def find_neighbors(
    matrix: RatingMatrixView,
    user_id: str,
    own: dict[str, int],
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[Neighbor]:
    """Every other user sharing at least one rated oyster with *user_id*."""
    if not own:
        return []
    candidates = matrix.co_raters(own.keys(), exclude_user_id=user_id)
    if config.neighbor_min_reviews > 1:
        candidates &= matrix.all_users_with_min_reviews(config.neighbor_min_reviews)

    neighbors: list[Neighbor] = []
    for other_id in sorted(candidates):
        ratings = matrix.ratings_for(other_id)
        similarity, shared = shared_cosine(own, ratings)
        if shared:
            neighbors.append(Neighbor(other_id, similarity, shared, ratings))
    return neighbors


def predicted_to_score(predicted: float) -> float:
    """Map a predicted rating on the numeric scale onto 0-100."""
    span = MAX_RATING_SCORE - MIN_RATING_SCORE
    return float(np.clip((predicted - MIN_RATING_SCORE) / span * 100.0, 0.0, 100.0))


class CollaborativeRecommender:
    """User-based collaborative filtering over shared-oyster cosine similarity."""

    def __init__(
        self, matrix: RatingMatrixView, config: EngineConfig = DEFAULT_ENGINE_CONFIG
    ) -> None:
        self._matrix = matrix
        self._config = config

    def has_enough_reviews(self, own: dict[str, int]) -> bool:
        return len(own) >= self._config.min_reviews_for_collaborative

    def recommend(
        self,
        user_id: str,
        candidates: list[Oyster],
        limit: int,
    ) -> list[RecommendationResult]:
        own = self._matrix.ratings_for(user_id)
        if not self.has_enough_reviews(own):
            logger.info(
                "User %s has %d reviews, need %d for collaborative filtering",
                user_id, len(own), self._config.min_reviews_for_collaborative,
            )
            return []
        if not candidates or limit < 1:
            return []

        neighbors = [
            n for n in find_neighbors(self._matrix, user_id, own, self._config)
            if n.similarity > 0
        ]

        scored: list[tuple[float, int, Oyster]] = []
        for oyster in candidates:
            if oyster.id in own:
                continue
            contributions = [
                (n.similarity, n.ratings[oyster.id])
                for n in neighbors if oyster.id in n.ratings
            ]
            if not contributions:
                continue
            total_similarity = sum(s for s, _ in contributions)
            predicted = sum(s * r for s, r in contributions) / total_similarity
            scored.append((predicted_to_score(predicted), len(contributions), oyster))

        scored.sort(key=lambda item: (-item[0], -item[1], item[2].id))

        results = [
            RecommendationResult(
                oyster=oyster,
                score=round(score, 4),
                match_reason=(
                    f"rated by {count} taster{'s' if count != 1 else ''} with similar taste"
                ),
                collaborative_score=round(score, 4),
                contributing_users=count,
            )
            for score, count, oyster in scored[:limit]
        ]
        logger.info(
            "Generated %d collaborative recommendations for user %s from %d neighbors",
            len(results), user_id, len(neighbors),
        )
        return results
