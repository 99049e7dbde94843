from __future__ import annotations

import pytest

from oyster_recs.recommendations.models import AttributeVector, Oyster, Rating, Review, User
from oyster_recs.recommendations.store import InMemoryReviewStore


def _vec(values: tuple[float, float, float, float, float]) -> AttributeVector:
    size, body, sweet, flavor, cream = values
    return AttributeVector(
        size=size, body=body, sweet_brininess=sweet, flavorfulness=flavor, creaminess=cream,
    )


@pytest.fixture
def vec():
    return _vec


@pytest.fixture
def make_oyster():
    def _make(oyster_id: str, values=(5, 5, 5, 5, 5), overall_score: float = 7.0, community=None):
        return Oyster(
            id=oyster_id,
            name=f"Oyster {oyster_id}",
            attributes=_vec(values),
            community_attributes=_vec(community) if community else None,
            overall_score=overall_score,
        )
    return _make


@pytest.fixture
def make_review():
    def _make(user_id: str, oyster_id: str, rating: Rating, values=None, weight: float = 1.0):
        return Review(
            id=f"{user_id}:{oyster_id}",
            user_id=user_id,
            oyster_id=oyster_id,
            rating=rating,
            attributes=_vec(values) if values else None,
            weighted_score=weight,
        )
    return _make


@pytest.fixture
def make_user():
    def _make(user_id: str, baseline=None):
        return User(id=user_id, name=f"User {user_id}", baseline=_vec(baseline) if baseline else None)
    return _make


@pytest.fixture
def taste_store(make_oyster, make_review, make_user) -> InMemoryReviewStore:
    """X loved A; B and C are unreviewed. Y and Z share only A."""
    oysters = [
        make_oyster("A", (3, 4, 8, 7, 6), overall_score=8.5),
        make_oyster("B", (7, 8, 3, 9, 8), overall_score=8.0),
        make_oyster("C", (5, 6, 5, 6, 5), overall_score=7.5),
        make_oyster("D", (2, 2, 9, 4, 3), overall_score=6.0),
        make_oyster("E", (9, 9, 2, 8, 9), overall_score=6.5),
        make_oyster("F", (4, 4, 6, 6, 6), overall_score=7.0),
    ]
    users = [make_user(uid) for uid in ("X", "Y", "Z", "W")]
    reviews = [
        make_review("X", "A", Rating.LOVE_IT, (3, 4, 8, 7, 6)),
        # Y: three reviews, only A shared with Z
        make_review("Y", "A", Rating.LOVE_IT),
        make_review("Y", "D", Rating.LIKE_IT),
        make_review("Y", "E", Rating.MEH),
        make_review("Z", "A", Rating.LOVE_IT),
        make_review("Z", "B", Rating.LIKE_IT),
        # W: exactly two reviews
        make_review("W", "A", Rating.LIKE_IT),
        make_review("W", "C", Rating.LOVE_IT),
    ]
    return InMemoryReviewStore(oysters=oysters, reviews=reviews, users=users)
