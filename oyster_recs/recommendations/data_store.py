from __future__ import annotations

from pathlib import Path

import pandas as pd

from .config import DEFAULT_ENGINE_CONFIG
from .models import DIMENSIONS, AttributeVector, Oyster, Rating, Review, User
from .store import InMemoryReviewStore

_store: InMemoryReviewStore | None = None


def _vector(row: pd.Series, prefix: str = "") -> AttributeVector | None:
    """Build a vector from ``<prefix><dimension>`` columns, or None if any is blank."""
    values = [row.get(f"{prefix}{dim}") for dim in DIMENSIONS]
    if any(v is None or pd.isna(v) for v in values):
        return None
    return AttributeVector(**{dim: float(v) for dim, v in zip(DIMENSIONS, values)})


def _oysters(df: pd.DataFrame) -> list[Oyster]:
    oysters: list[Oyster] = []
    for _, row in df.iterrows():
        oysters.append(Oyster(
            id=str(row["id"]),
            name=row["name"],
            species=row.get("species", "") if pd.notna(row.get("species")) else "",
            origin=row.get("origin", "") if pd.notna(row.get("origin")) else "",
            attributes=_vector(row),
            community_attributes=_vector(row, prefix="avg_"),
            overall_score=float(row["overall_score"]) if pd.notna(row.get("overall_score")) else 0.0,
            total_reviews=int(row["total_reviews"]) if pd.notna(row.get("total_reviews")) else 0,
        ))
    return oysters


def _reviews(df: pd.DataFrame) -> list[Review]:
    reviews: list[Review] = []
    for _, row in df.iterrows():
        weight = row.get("weighted_score")
        reviews.append(Review(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            oyster_id=str(row["oyster_id"]),
            rating=Rating(row["rating"]),
            attributes=_vector(row),
            weighted_score=float(weight) if pd.notna(weight) else 1.0,
        ))
    return reviews


def _users(df: pd.DataFrame) -> list[User]:
    return [
        User(id=str(row["id"]), name=row["name"], baseline=_vector(row, prefix="baseline_"))
        for _, row in df.iterrows()
    ]


def build_store(
    oysters: pd.DataFrame,
    reviews: pd.DataFrame,
    users: pd.DataFrame,
    favorites: pd.DataFrame | None = None,
) -> InMemoryReviewStore:
    """Turn canonical frames into an in-memory store."""
    favorite_pairs: list[tuple[str, str]] = []
    if favorites is not None:
        favorite_pairs = [
            (str(r["user_id"]), str(r["oyster_id"])) for _, r in favorites.iterrows()
        ]
    return InMemoryReviewStore(
        oysters=_oysters(oysters),
        reviews=_reviews(reviews),
        users=_users(users),
        favorites=favorite_pairs,
    )


def load_store(data_dir: Path) -> InMemoryReviewStore:
    favorites_csv = data_dir / "favorites.csv"
    return build_store(
        oysters=pd.read_csv(data_dir / "oysters.csv"),
        reviews=pd.read_csv(data_dir / "reviews.csv"),
        users=pd.read_csv(data_dir / "users.csv"),
        favorites=pd.read_csv(favorites_csv) if favorites_csv.exists() else None,
    )


def get_store() -> InMemoryReviewStore:
    """Return the seed-data store, loading it on first call."""
    global _store
    if _store is None:
        _store = load_store(DEFAULT_ENGINE_CONFIG.data_dir)
    return _store
