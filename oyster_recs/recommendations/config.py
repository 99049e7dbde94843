from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, default))


@dataclass(frozen=True)
class EngineConfig:
    default_limit: int = _env_int("RECS_DEFAULT_LIMIT", 10)
    max_limit: int = _env_int("RECS_MAX_LIMIT", 50)
    max_similar_users: int = _env_int("RECS_MAX_SIMILAR_USERS", 20)
    min_reviews_for_collaborative: int = _env_int("RECS_MIN_REVIEWS_COLLABORATIVE", 3)
    neighbor_min_reviews: int = _env_int("RECS_NEIGHBOR_MIN_REVIEWS", 1)
    favorite_weight: float = _env_float("RECS_FAVORITE_WEIGHT", 1.5)
    data_dir: Path = Path(
        os.getenv("RECS_DATA_DIR", Path(__file__).resolve().parent.parent / "data")
    )


DEFAULT_ENGINE_CONFIG = EngineConfig()


def clamp_limit(value: int, upper: int) -> int:
    """Clamp *value* into ``[1, upper]``."""
    return max(1, min(upper, value))
