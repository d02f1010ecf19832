from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RecommendationConfig:
    top_tags: int = 10
    top_skills: int = 5
    top_interests: int = 5
    tag_weight: int = 20
    skill_weight: int = 25
    interest_weight: int = 15
    max_score: int = 100
    max_reasons: int = 3
    based_on_tags: int = 3
    max_results: int = 5
    ttl_ms: int = 24 * 60 * 60 * 1000  # 24 hours


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
