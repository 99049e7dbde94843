from __future__ import annotations

import numpy as np
import pytest

from oyster_recs.recommendations.attribute import (
    MAX_DISTANCE,
    AttributeRecommender,
    distance_to_score,
    match_reason,
)


def test_distance_zero_is_max_score():
    assert distance_to_score(0.0) == 100.0


def test_diagonal_is_min_score():
    assert distance_to_score(MAX_DISTANCE) == pytest.approx(0.0)


def test_score_strictly_decreases_with_distance():
    distances = np.linspace(0.0, MAX_DISTANCE, 50)
    scores = [distance_to_score(d) for d in distances]
    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_closer_oyster_scores_higher(make_oyster, vec):
    profile = vec((5, 5, 5, 5, 5))
    near = make_oyster("near", (5, 6, 5, 5, 5))
    far = make_oyster("far", (9, 1, 9, 1, 9))
    results = AttributeRecommender().recommend(profile, [far, near], limit=10)
    assert [r.oyster_id for r in results] == ["near", "far"]
    assert results[0].score >= results[1].score


def test_exact_match_scores_100(make_oyster, vec):
    results = AttributeRecommender().recommend(
        vec((3, 4, 8, 7, 6)), [make_oyster("A", (3, 4, 8, 7, 6))], limit=1
    )
    assert results[0].score == 100.0
    assert results[0].attribute_score == 100.0


def test_ties_break_by_community_rating_then_id(make_oyster, vec):
    profile = vec((5, 5, 5, 5, 5))
    candidates = [
        make_oyster("b", (6, 5, 5, 5, 5), overall_score=7.0),
        make_oyster("a", (4, 5, 5, 5, 5), overall_score=7.0),
        make_oyster("c", (5, 5, 5, 5, 6), overall_score=9.0),
    ]
    results = AttributeRecommender().recommend(profile, candidates, limit=10)
    assert [r.oyster_id for r in results] == ["c", "a", "b"]


def test_truncates_to_limit(make_oyster, vec):
    candidates = [make_oyster(str(i), (i, 5, 5, 5, 5)) for i in range(1, 9)]
    results = AttributeRecommender().recommend(vec((5, 5, 5, 5, 5)), candidates, limit=3)
    assert len(results) == 3


def test_empty_inputs_return_empty(make_oyster, vec):
    recommender = AttributeRecommender()
    assert recommender.recommend(None, [make_oyster("A")], limit=5) == []
    assert recommender.recommend(vec((5, 5, 5, 5, 5)), [], limit=5) == []


def test_match_reason_names_two_close_dimensions():
    assert match_reason(np.array([0.0, 4.0, 5.0, 1.0, 6.0])) == "similar size and flavor"


def test_match_reason_names_single_dimension_when_second_is_far():
    assert match_reason(np.array([5.0, 4.0, 0.5, 3.0, 6.0])) == "similar brininess"


def test_derived_profile_ranks_closer_oyster_first(taste_store):
    from oyster_recs.recommendations.profile import ProfileBuilder

    profile = ProfileBuilder(taste_store).build_profile("X")
    candidates = taste_store.get_all_oysters_except({"A"})
    results = AttributeRecommender().recommend(profile, candidates, limit=10)
    ids = [r.oyster_id for r in results]
    assert "A" not in ids
    assert ids.index("C") < ids.index("B")
