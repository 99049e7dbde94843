from __future__ import annotations

from collections.abc import Iterable

from .store import ReviewStore


class RatingMatrixView:
    """Sparse user x oyster rating rows, read from the store on demand.

    Rows are never cached; a view lives for one request.
    """

    def __init__(self, store: ReviewStore) -> None:
        self._store = store

    def ratings_for(self, user_id: str) -> dict[str, int]:
        """Return ``{oyster_id: numeric rating}`` for one user."""
        return {
            review.oyster_id: review.numeric_rating
            for review in self._store.get_reviews_for_user(user_id)
        }

    def all_users_with_min_reviews(self, min_reviews: int) -> set[str]:
        return self._store.get_user_ids_with_min_reviews(min_reviews)

    def co_raters(self, oyster_ids: Iterable[str], exclude_user_id: str) -> set[str]:
        """Users other than *exclude_user_id* who rated any of *oyster_ids*."""
        return {
            review.user_id
            for review in self._store.get_reviews_for_oysters(oyster_ids)
            if review.user_id != exclude_user_id
        }
