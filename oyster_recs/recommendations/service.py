from __future__ import annotations

import logging

from .attribute import AttributeRecommender
from .collaborative import CollaborativeRecommender
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig, clamp_limit
from .hybrid import HybridCombiner
from .matrix import RatingMatrixView
from .models import (
    Oyster,
    RecommendationBatch,
    RecommendationMode,
    RecommendationResult,
    SimilarUsersBatch,
    TasteProfile,
)
from .profile import ProfileBuilder
from .similar_users import SimilarUserFinder
from .store import ReviewStore

logger = logging.getLogger(__name__)

NO_TASTE_PROFILE = "no_taste_profile"
INSUFFICIENT_REVIEWS = "insufficient_reviews"
NO_CANDIDATES = "no_candidates"
NO_MATCHES = "no_matches"
NO_SIMILAR_USERS = "no_similar_users"


class RecommendationService:
    """
    Entry point for the API layer.

    Every call reads fresh from the store; nothing computed here outlives
    the call. Store failures propagate as ``StoreError``; a lack of data
    never raises and is reported through ``reason`` on the returned batch.
    """

    def __init__(self, store: ReviewStore, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self._store = store
        self._config = config
        self._profiles = ProfileBuilder(store, config)
        self._attribute = AttributeRecommender()
        self._combiner = HybridCombiner()

    def get_recommendations(
        self,
        user_id: str,
        mode: RecommendationMode = RecommendationMode.attribute,
        limit: int | None = None,
    ) -> RecommendationBatch:
        mode = RecommendationMode(mode)
        limit = clamp_limit(
            self._config.default_limit if limit is None else limit, self._config.max_limit
        )

        matrix = RatingMatrixView(self._store)
        own = matrix.ratings_for(user_id)
        candidates = self._store.get_all_oysters_except(own.keys())

        if mode is RecommendationMode.attribute:
            results, reason = self._attribute_results(user_id, candidates, limit)
        elif mode is RecommendationMode.collaborative:
            results, reason = self._collaborative_results(
                user_id, matrix, own, candidates, limit
            )
        else:
            # Sub-results cover every candidate so truncation never hides a side.
            pool = len(candidates)
            attr, attr_reason = self._attribute_results(user_id, candidates, pool)
            collab, collab_reason = self._collaborative_results(
                user_id, matrix, own, candidates, pool
            )
            results = self._combiner.combine(attr, collab, limit)
            reason = None if results else (attr_reason or collab_reason or NO_MATCHES)

        results = [r for r in results if r.oyster_id not in own]
        logger.info(
            "Generated %d %s recommendations for user %s (reason: %s)",
            len(results), mode.value, user_id, reason,
        )
        return RecommendationBatch(mode=mode, results=results, reason=reason)

    def get_similar_users(self, user_id: str, limit: int | None = None) -> SimilarUsersBatch:
        limit = clamp_limit(
            self._config.default_limit if limit is None else limit,
            self._config.max_similar_users,
        )
        matrix = RatingMatrixView(self._store)
        finder = SimilarUserFinder(self._store, matrix, self._config)
        similar = finder.find_similar(user_id, limit)
        if similar:
            return SimilarUsersBatch(results=similar)
        if not finder.has_enough_reviews(matrix.ratings_for(user_id)):
            return SimilarUsersBatch(reason=INSUFFICIENT_REVIEWS)
        return SimilarUsersBatch(reason=NO_SIMILAR_USERS)

    def get_taste_profile(self, user_id: str) -> TasteProfile | None:
        return self._profiles.describe(user_id)

    def _attribute_results(
        self, user_id: str, candidates: list[Oyster], limit: int
    ) -> tuple[list[RecommendationResult], str | None]:
        if not candidates:
            return [], NO_CANDIDATES
        profile = self._profiles.build_profile(user_id)
        if profile is None:
            return [], NO_TASTE_PROFILE
        results = self._attribute.recommend(profile, candidates, limit)
        return results, None if results else NO_MATCHES

    def _collaborative_results(
        self,
        user_id: str,
        matrix: RatingMatrixView,
        own: dict[str, int],
        candidates: list[Oyster],
        limit: int,
    ) -> tuple[list[RecommendationResult], str | None]:
        collaborative = CollaborativeRecommender(matrix, self._config)
        if not collaborative.has_enough_reviews(own):
            return [], INSUFFICIENT_REVIEWS
        if not candidates:
            return [], NO_CANDIDATES
        results = collaborative.recommend(user_id, candidates, limit)
        return results, None if results else NO_MATCHES
