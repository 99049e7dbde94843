from __future__ import annotations

import pandas as pd
import pytest

from oyster_recs.recommendations.config import DEFAULT_ENGINE_CONFIG
from oyster_recs.recommendations.data_store import build_store, load_store
from oyster_recs.recommendations.models import Rating


def _frames():
    oysters = pd.DataFrame([
        {"id": "o-1", "name": "Kumamoto", "species": "Crassostrea sikamea", "origin": "WA",
         "size": 3, "body": 4, "sweet_brininess": 8, "flavorfulness": 7, "creaminess": 6,
         "overall_score": 8.5, "total_reviews": 2},
        {"id": "o-2", "name": "Wellfleet", "species": None, "origin": None,
         "size": 6, "body": 5, "sweet_brininess": 3, "flavorfulness": 6, "creaminess": 4,
         "overall_score": None, "total_reviews": None},
    ])
    reviews = pd.DataFrame([
        {"id": "r-1", "user_id": "u-1", "oyster_id": "o-1", "rating": "LOVE_IT",
         "size": 3, "body": 4, "sweet_brininess": 8, "flavorfulness": 7, "creaminess": 6,
         "weighted_score": 1.2},
        {"id": "r-2", "user_id": "u-1", "oyster_id": "o-2", "rating": "MEH",
         "size": None, "body": None, "sweet_brininess": None, "flavorfulness": None,
         "creaminess": None, "weighted_score": None},
    ])
    users = pd.DataFrame([{"id": "u-1", "name": "Ava"}])
    return oysters, reviews, users


def test_build_store_from_frames():
    oysters, reviews, users = _frames()
    store = build_store(oysters, reviews, users)

    [kumamoto, wellfleet] = store.get_oysters(["o-1", "o-2"])
    assert kumamoto.attributes.sweet_brininess == 8
    assert kumamoto.community_attributes is None
    assert wellfleet.species == ""
    assert wellfleet.overall_score == 0.0

    by_oyster = {r.oyster_id: r for r in store.get_reviews_for_user("u-1")}
    assert by_oyster["o-1"].rating is Rating.LOVE_IT
    assert by_oyster["o-1"].weighted_score == pytest.approx(1.2)
    # blank attribute columns mean "no vector" and a blank weight means 1.0
    assert by_oyster["o-2"].attributes is None
    assert by_oyster["o-2"].weighted_score == 1.0

    assert store.get_user("u-1").baseline is None
    assert store.get_favorite_oyster_ids("u-1") == set()


def test_build_store_reads_favorites():
    oysters, reviews, users = _frames()
    favorites = pd.DataFrame([{"user_id": "u-1", "oyster_id": "o-1"}])
    store = build_store(oysters, reviews, users, favorites)
    assert store.get_favorite_oyster_ids("u-1") == {"o-1"}


def test_duplicate_review_is_rejected():
    oysters, reviews, users = _frames()
    doubled = pd.concat([reviews, reviews.iloc[[0]].assign(id="r-3")], ignore_index=True)
    with pytest.raises(ValueError, match="duplicate review"):
        build_store(oysters, doubled, users)


def test_seed_dataset_loads():
    store = load_store(DEFAULT_ENGINE_CONFIG.data_dir)

    assert len(store.get_all_oysters_except([])) == 12
    assert {r.oyster_id for r in store.get_reviews_for_user("u-1")} == {"o-01", "o-02", "o-03", "o-04"}
    assert store.get_user("u-5").baseline is not None
    assert store.get_favorite_oyster_ids("u-1") == {"o-04"}
    assert "u-4" not in store.get_user_ids_with_min_reviews(3)

    [with_community] = store.get_oysters(["o-06"])
    assert with_community.community_attributes is not None
    assert with_community.taste_vector == with_community.community_attributes
