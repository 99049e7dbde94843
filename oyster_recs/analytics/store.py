from __future__ import annotations

import time
from typing import Any

_events: list[dict[str, Any]] = []


def record_request(
    endpoint: str,
    user_id: str,
    results_returned: int,
    response_time_ms: float,
    reason: str | None = None,
) -> None:
    """Log one served recommendation or similar-users request."""
    _events.append({
        "endpoint": endpoint,
        "user_id": user_id,
        "results_returned": results_returned,
        "reason": reason,
        "response_time_ms": response_time_ms,
        "timestamp": time.time(),
    })


def get_events() -> list[dict[str, Any]]:
    return _events


def clear_events() -> None:
    _events.clear()
