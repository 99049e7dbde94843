from __future__ import annotations

from .models import RecommendationResult

ATTRIBUTE_WEIGHT = 0.6
COLLABORATIVE_WEIGHT = 0.4


def _percent(score: float | None) -> float:
    if score is None:
        return 0.0
    return max(0.0, min(100.0, float(score)))


class HybridCombiner:
    """Weighted blend of attribute and collaborative scores; a missing side counts as 0."""

    def __init__(
        self,
        attribute_weight: float = ATTRIBUTE_WEIGHT,
        collaborative_weight: float = COLLABORATIVE_WEIGHT,
    ) -> None:
        self._attribute_weight = attribute_weight
        self._collaborative_weight = collaborative_weight

    def combine(
        self,
        attribute_results: list[RecommendationResult],
        collaborative_results: list[RecommendationResult],
        limit: int,
    ) -> list[RecommendationResult]:
        if limit < 1:
            return []

        by_attribute = {r.oyster_id: r for r in attribute_results}
        by_collaborative = {r.oyster_id: r for r in collaborative_results}

        combined: list[tuple[float, float, RecommendationResult]] = []
        for oyster_id in by_attribute.keys() | by_collaborative.keys():
            attr = by_attribute.get(oyster_id)
            collab = by_collaborative.get(oyster_id)
            attr_score = _percent(attr.score) if attr else 0.0
            collab_score = _percent(collab.score) if collab else 0.0
            score = (
                self._attribute_weight * attr_score
                + self._collaborative_weight * collab_score
            )
            source = attr or collab
            if attr and collab:
                reason = f"{attr.match_reason}; {collab.match_reason}"
            else:
                reason = source.match_reason
            combined.append((
                score,
                max(attr_score, collab_score),
                RecommendationResult(
                    oyster=source.oyster,
                    score=round(score, 4),
                    match_reason=reason,
                    attribute_score=round(attr_score, 4) if attr else None,
                    collaborative_score=round(collab_score, 4) if collab else None,
                    contributing_users=collab.contributing_users if collab else None,
                ),
            ))

        combined.sort(key=lambda item: (-item[0], -item[1], item[2].oyster_id))
        return [result for _, _, result in combined[:limit]]
