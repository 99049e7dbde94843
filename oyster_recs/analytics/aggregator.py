from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    total = len(events)

    times = [e["response_time_ms"] for e in events]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    by_endpoint = dict(Counter(e["endpoint"] for e in events))

    # Requests that came back empty, grouped by why
    empty = [e for e in events if e["results_returned"] == 0]
    empty_reasons = dict(Counter(e.get("reason") or "unknown" for e in empty))

    active_users = len({e["user_id"] for e in events})

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "requests_by_endpoint": by_endpoint,
        "active_users": active_users,
        "empty_results": {
            "count": len(empty),
            "rate": round(len(empty) / total * 100, 1) if total else 0.0,
            "reasons": empty_reasons,
        },
    }
