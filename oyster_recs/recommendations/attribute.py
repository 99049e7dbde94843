"""
Attribute-similarity ranking.

Each candidate is scored by Euclidean distance between its taste vector and
the user's preferred vector. The score is linear in distance:

    score = 100 * (1 - distance / MAX_DISTANCE)

where ``MAX_DISTANCE`` is the diagonal of the 1-10 attribute cube, so a
perfect match scores 100 and the farthest possible oyster scores 0.
"""
from __future__ import annotations

import math

import numpy as np

from .models import (
    DIMENSION_LABELS,
    DIMENSIONS,
    AttributeVector,
    Oyster,
    RecommendationResult,
)

MAX_DISTANCE = math.sqrt(len(DIMENSIONS) * (10.0 - 1.0) ** 2)

# A second dimension is named in the reason when its gap is this close to the best one.
REASON_GAP_TOLERANCE = 1.5


def distance_to_score(distance: float) -> float:
    return float(np.clip(100.0 * (1.0 - distance / MAX_DISTANCE), 0.0, 100.0))


def match_reason(gaps: np.ndarray) -> str:
    """Describe the one or two dimensions where the oyster is closest to the profile."""
    order = np.argsort(gaps, kind="stable")
    first = DIMENSION_LABELS[DIMENSIONS[order[0]]]
    if gaps[order[1]] - gaps[order[0]] <= REASON_GAP_TOLERANCE:
        second = DIMENSION_LABELS[DIMENSIONS[order[1]]]
        return f"similar {first} and {second}"
    return f"similar {first}"


class AttributeRecommender:
    def recommend(
        self,
        profile: AttributeVector | None,
        candidates: list[Oyster],
        limit: int,
    ) -> list[RecommendationResult]:
        if profile is None or not candidates or limit < 1:
            return []

        target = profile.as_array()
        matrix = np.vstack([o.taste_vector.as_array() for o in candidates])
        gaps = np.abs(matrix - target)
        distances = np.linalg.norm(matrix - target, axis=1)

        scored: list[tuple[float, Oyster, np.ndarray]] = [
            (distance_to_score(float(d)), oyster, gap_row)
            for oyster, d, gap_row in zip(candidates, distances, gaps)
        ]
        scored.sort(key=lambda item: (-item[0], -item[1].overall_score, item[1].id))

        return [
            RecommendationResult(
                oyster=oyster,
                score=round(score, 4),
                match_reason=match_reason(gap_row),
                attribute_score=round(score, 4),
            )
            for score, oyster, gap_row in scored[:limit]
        ]
