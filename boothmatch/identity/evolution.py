"""
Identity evolution feedback loop.

Every processed conversation can teach us something about the attendee:
skills and interests extracted from the transcript are folded into their
stored identity. The fold is append-only; nothing is ever removed here.

Recommendations are regenerated on the first interaction and then on every
even-numbered one (2, 4, 6, ...).
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Protocol, Sequence

from ..recommendations.engine import now_ms
from ..recommendations.models import InteractionRecord, Sentiment
from .models import Identity, TagCount, TagSummary, UserProfile

logger = logging.getLogger(__name__)

RECOMMENDATION_CADENCE = 2


class UserStore(Protocol):
    def get_user(self, user_id: str) -> UserProfile | None: ...

    def upsert_user(self, profile: UserProfile) -> str: ...


def should_generate_recommendations(interaction_count: int) -> bool:
    """True for the first interaction and every even-numbered one."""
    return interaction_count == 1 or interaction_count % RECOMMENDATION_CADENCE == 0


def merge_terms(existing: Iterable[str], new: Iterable[str]) -> list[str]:
    """Exact-match set union that keeps existing order and appends new values."""
    return list(dict.fromkeys([*existing, *new]))


def evolve_user_identity(
    store: UserStore,
    user_id: str,
    new_skills: Sequence[str],
    new_interests: Sequence[str],
    now: int | None = None,
) -> str | None:
    """Union new skills/interests into the user's identity.

    Returns the user id, or ``None`` when the user is unknown. The store is
    only written when the union actually grew.
    """
    user = store.get_user(user_id)
    if user is None:
        return None

    identity = user.identity or Identity()
    skills = merge_terms(identity.skills, new_skills)
    interests = merge_terms(identity.interests, new_interests)

    if len(skills) == len(identity.skills) and len(interests) == len(identity.interests):
        return user.user_id

    stamp = now if now is not None else now_ms()
    user.identity = identity.model_copy(update={
        "skills": skills,
        "interests": interests,
        "last_updated": stamp,
    })
    user.updated_at = stamp
    store.upsert_user(user)
    logger.info(
        "Evolved identity for %s: +%d skills, +%d interests",
        user_id,
        len(skills) - len(identity.skills),
        len(interests) - len(identity.interests),
    )
    return user.user_id


def summarize_tags(interactions: Sequence[InteractionRecord]) -> TagSummary:
    """Full tag frequency table plus the share of positive conversations."""
    counts: Counter[str] = Counter()
    positive = 0
    for interaction in interactions:
        counts.update(interaction.tags)
        if interaction.sentiment == Sentiment.positive:
            positive += 1

    total = len(interactions)
    return TagSummary(
        tags=[TagCount(tag=t, count=c) for t, c in counts.most_common()],
        total_interactions=total,
        positive_ratio=positive / total if total else 0.0,
    )
