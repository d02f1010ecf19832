from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence

from ..analytics.store import EventLog
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import (
    Booth,
    InteractionRecord,
    RecommendationBatch,
    RecommendationRecord,
    ScoredBooth,
    Sentiment,
)

logger = logging.getLogger(__name__)


class RecommendationStore(Protocol):
    def list_interactions_by_user(self, user_id: str) -> list[InteractionRecord]: ...

    def list_booth_catalog(self) -> list[Booth]: ...

    def insert_recommendation(self, record: RecommendationRecord) -> str: ...


@dataclass
class UserSignals:
    top_tags: list[str] = field(default_factory=list)
    top_skills: list[str] = field(default_factory=list)
    top_interests: list[str] = field(default_factory=list)
    visited_booth_ids: set[str] = field(default_factory=set)
    positive_count: int = 0
    total_interactions: int = 0


def now_ms() -> int:
    return int(time.time() * 1000)


def _top_terms(counts: Counter[str], k: int) -> list[str]:
    # most_common keeps first-encountered order for equal counts
    return [term for term, _ in counts.most_common(k)]


def aggregate_signals(
    interactions: Iterable[InteractionRecord],
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> UserSignals:
    """Fold an interaction history into the user's most frequent tags, skills and interests."""
    tag_counts: Counter[str] = Counter()
    skill_counts: Counter[str] = Counter()
    interest_counts: Counter[str] = Counter()
    visited: set[str] = set()
    positive = 0
    total = 0

    for interaction in interactions:
        total += 1
        if interaction.booth_id:
            visited.add(interaction.booth_id)
        if interaction.sentiment == Sentiment.positive:
            positive += 1
        tag_counts.update(interaction.tags)
        skill_counts.update(interaction.mentioned_skills)
        interest_counts.update(interaction.mentioned_interests)

    return UserSignals(
        top_tags=_top_terms(tag_counts, config.top_tags),
        top_skills=_top_terms(skill_counts, config.top_skills),
        top_interests=_top_terms(interest_counts, config.top_interests),
        visited_booth_ids=visited,
        positive_count=positive,
        total_interactions=total,
    )


def score_booth(
    booth: Booth,
    signals: UserSignals,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> ScoredBooth:
    """Score one booth against the user's signals.

    Matching is one-directional: the booth's field must contain the user's
    term, case-insensitively.
    """
    booth_tags = [t.lower() for t in booth.tags]
    booth_looking_for = [lf.lower() for lf in booth.looking_for]
    description = booth.description.lower() if booth.description is not None else None

    score = 0
    reasons: list[str] = []

    for tag in signals.top_tags:
        needle = tag.lower()
        if any(needle in bt for bt in booth_tags):
            score += config.tag_weight
            reasons.append(f'Matches your interest in "{tag}"')

    for skill in signals.top_skills:
        needle = skill.lower()
        if any(needle in lf for lf in booth_looking_for):
            score += config.skill_weight
            reasons.append(f'They\'re looking for "{skill}"')

    if description is not None:
        for interest in signals.top_interests:
            if interest.lower() in description:
                score += config.interest_weight
                reasons.append(f'Aligned with your interest in "{interest}"')

    return ScoredBooth(
        booth=booth,
        score=min(config.max_score, score),
        match_reasons=reasons[: config.max_reasons],
        based_on_tags=signals.top_tags[: config.based_on_tags],
    )


def rank_booths(
    signals: UserSignals,
    booths: Sequence[Booth],
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[ScoredBooth]:
    """Score unvisited booths and return the best non-zero matches."""
    candidates = [b for b in booths if b.id not in signals.visited_booth_ids]
    scored = [score_booth(b, signals, config) for b in candidates]
    scored = [s for s in scored if s.score > 0]
    # sorted() is stable, so equal scores keep catalog order
    scored = sorted(scored, key=lambda s: s.score, reverse=True)
    return scored[: config.max_results]


def score_booths(
    interactions: Sequence[InteractionRecord],
    booths: Sequence[Booth],
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[ScoredBooth]:
    if not interactions:
        return []
    signals = aggregate_signals(interactions, config)
    logger.debug(
        "Signals: tags=%s skills=%s interests=%s",
        signals.top_tags, signals.top_skills, signals.top_interests,
    )
    return rank_booths(signals, booths, config)


def build_recommendation_record(
    user_id: str,
    scored: ScoredBooth,
    created_at: int,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> RecommendationRecord:
    return RecommendationRecord(
        user_id=user_id,
        booth_id=scored.booth.id,
        score=scored.score,
        reasoning=list(scored.match_reasons),
        based_on=", ".join(scored.based_on_tags),
        created_at=created_at,
        expires_at=created_at + config.ttl_ms,
    )


def generate_recommendations(
    user_id: str,
    interactions: Sequence[InteractionRecord],
    booths: Sequence[Booth],
    store: RecommendationStore,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    now: int | None = None,
    events: EventLog | None = None,
) -> RecommendationBatch:
    """
    Rank booths for a user and persist the winners.

    Returns the scored booths alongside the ids the store assigned to each
    inserted recommendation. Store errors propagate; recommendations inserted
    before the failure stay in place. When ``events`` is given, the run is
    recorded there.
    """
    start_time = time.time()
    logger.info("Generating recommendations for %s", user_id)

    if not interactions:
        logger.info("No interactions yet for %s, skipping recommendations", user_id)

    top = score_booths(interactions, booths, config)
    logger.info(
        "Top recommendations for %s: %s",
        user_id, [(s.booth.name, s.score) for s in top],
    )

    created_at = now if now is not None else now_ms()
    saved_ids: list[str] = []
    for scored in top:
        record = build_recommendation_record(user_id, scored, created_at, config)
        saved_ids.append(store.insert_recommendation(record))

    if events is not None:
        _record_generation(events, user_id, top, start_time)
    return RecommendationBatch(recommendations=top, recommendation_ids=saved_ids)


def generate_for_user(
    user_id: str,
    store: RecommendationStore,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    now: int | None = None,
    events: EventLog | None = None,
) -> RecommendationBatch:
    interactions = store.list_interactions_by_user(user_id)
    booths = store.list_booth_catalog()
    return generate_recommendations(user_id, interactions, booths, store, config, now, events)


def _record_generation(
    events: EventLog,
    user_id: str,
    top: list[ScoredBooth],
    start_time: float,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    events.record("recommendations_generated", {
        "user_id": user_id,
        "booth_ids": [s.booth.id for s in top],
        "scores": [s.score for s in top],
        "results_returned": len(top),
        "response_time_ms": elapsed_ms,
    })
