from __future__ import annotations

from .collaborative import find_neighbors
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig, clamp_limit
from .matrix import RatingMatrixView
from .models import SimilarUser
from .store import ReviewStore


class SimilarUserFinder:
    """Ranks other users by how closely their ratings track the requesting user's."""

    def __init__(
        self,
        store: ReviewStore,
        matrix: RatingMatrixView,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
    ) -> None:
        self._store = store
        self._matrix = matrix
        self._config = config

    def has_enough_reviews(self, own: dict[str, int]) -> bool:
        return len(own) >= self._config.min_reviews_for_collaborative

    def find_similar(self, user_id: str, limit: int) -> list[SimilarUser]:
        limit = clamp_limit(limit, self._config.max_similar_users)
        own = self._matrix.ratings_for(user_id)
        if not self.has_enough_reviews(own):
            return []

        # find_neighbors never returns the requesting user
        neighbors = [
            n for n in find_neighbors(self._matrix, user_id, own, self._config)
            if n.similarity > 0
        ]
        neighbors.sort(key=lambda n: (-n.similarity, -n.shared_oysters, n.user_id))
        top = neighbors[:limit]

        users = {u.id: u for u in self._store.get_users(n.user_id for n in top)}
        return [
            SimilarUser(
                id=n.user_id,
                name=users[n.user_id].name if n.user_id in users else "",
                similarity=round(n.similarity, 4),
                shared_oysters=n.shared_oysters,
            )
            for n in top
        ]
