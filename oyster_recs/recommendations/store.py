"""Read-only store port used by the recommendation engine."""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable

from .models import Oyster, Review, User


class StoreError(Exception):
    """Raised when the review/oyster/user store cannot serve a read."""


class StoreTimeoutError(StoreError):
    """A store read exceeded its deadline."""


class ReviewStore(ABC):
    """Narrow read contract the engine is written against."""

    @abstractmethod
    def get_user(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_users(self, user_ids: Iterable[str]) -> list[User]: ...

    @abstractmethod
    def get_oysters(self, oyster_ids: Iterable[str]) -> list[Oyster]: ...

    @abstractmethod
    def get_all_oysters_except(self, oyster_ids: Iterable[str]) -> list[Oyster]: ...

    @abstractmethod
    def get_reviews_for_user(self, user_id: str) -> list[Review]: ...

    @abstractmethod
    def get_reviews_for_oyster(self, oyster_id: str) -> list[Review]: ...

    @abstractmethod
    def get_reviews_for_oysters(self, oyster_ids: Iterable[str]) -> list[Review]: ...

    @abstractmethod
    def get_favorite_oyster_ids(self, user_id: str) -> set[str]: ...

    @abstractmethod
    def get_user_ids_with_min_reviews(self, min_reviews: int) -> set[str]: ...


class InMemoryReviewStore(ReviewStore):
    """Store backed by plain lists; used for the seed dataset and in tests.

    Uniqueness of (user, oyster) reviews is enforced here the way a
    relational store would enforce it with a unique index.
    """

    def __init__(
        self,
        oysters: Iterable[Oyster] = (),
        reviews: Iterable[Review] = (),
        users: Iterable[User] = (),
        favorites: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._oysters: dict[str, Oyster] = {o.id: o for o in oysters}
        self._users: dict[str, User] = {u.id: u for u in users}
        self._reviews_by_user: dict[str, list[Review]] = defaultdict(list)
        self._reviews_by_oyster: dict[str, list[Review]] = defaultdict(list)
        seen: set[tuple[str, str]] = set()
        for review in reviews:
            key = (review.user_id, review.oyster_id)
            if key in seen:
                raise ValueError(
                    f"duplicate review for user {review.user_id} on oyster {review.oyster_id}"
                )
            seen.add(key)
            self._reviews_by_user[review.user_id].append(review)
            self._reviews_by_oyster[review.oyster_id].append(review)
        self._favorites: dict[str, set[str]] = defaultdict(set)
        for user_id, oyster_id in favorites:
            self._favorites[user_id].add(oyster_id)

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_users(self, user_ids: Iterable[str]) -> list[User]:
        return [self._users[uid] for uid in user_ids if uid in self._users]

    def get_oysters(self, oyster_ids: Iterable[str]) -> list[Oyster]:
        return [self._oysters[oid] for oid in oyster_ids if oid in self._oysters]

    def get_all_oysters_except(self, oyster_ids: Iterable[str]) -> list[Oyster]:
        excluded = set(oyster_ids)
        return [o for oid, o in self._oysters.items() if oid not in excluded]

    def get_reviews_for_user(self, user_id: str) -> list[Review]:
        return list(self._reviews_by_user.get(user_id, []))

    def get_reviews_for_oyster(self, oyster_id: str) -> list[Review]:
        return list(self._reviews_by_oyster.get(oyster_id, []))

    def get_reviews_for_oysters(self, oyster_ids: Iterable[str]) -> list[Review]:
        reviews: list[Review] = []
        for oid in set(oyster_ids):
            reviews.extend(self._reviews_by_oyster.get(oid, []))
        return reviews

    def get_favorite_oyster_ids(self, user_id: str) -> set[str]:
        return set(self._favorites.get(user_id, set()))

    def get_user_ids_with_min_reviews(self, min_reviews: int) -> set[str]:
        return {
            uid for uid, revs in self._reviews_by_user.items() if len(revs) >= min_reviews
        }
