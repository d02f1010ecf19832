from __future__ import annotations

import logging
import uuid

from ..identity.models import UserProfile
from ..recommendations.engine import now_ms
from ..recommendations.models import Booth, InteractionRecord, RecommendationRecord
from .catalog import load_booth_catalog
from .config import DEFAULT_STORAGE_CONFIG, StorageConfig

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryStore:
    """Document store for users, booths, interactions and recommendations.

    One instance is owned by whoever constructs it; nothing is shared at
    module level.
    """

    def __init__(self, config: StorageConfig = DEFAULT_STORAGE_CONFIG) -> None:
        self.config = config
        self._users: dict[str, UserProfile] = {}
        self._booths: dict[str, Booth] = {}
        self._interactions: list[InteractionRecord] = []
        self._recommendations: list[RecommendationRecord] = []
        self._last_created_at = 0

    # ── Interactions ─────────────────────────────────────────────────────

    def insert_interaction(self, record: InteractionRecord) -> str:
        created_at = max(now_ms(), self._last_created_at + 1)
        self._last_created_at = created_at
        stored = record.model_copy(update={"id": _new_id(), "created_at": created_at})
        self._interactions.append(stored)
        return stored.id

    def get_interaction(self, interaction_id: str) -> InteractionRecord | None:
        for interaction in self._interactions:
            if interaction.id == interaction_id:
                return interaction
        return None

    def list_interactions_by_user(self, user_id: str) -> list[InteractionRecord]:
        """Return the user's interactions, newest first."""
        rows = [i for i in self._interactions if i.user_id == user_id]
        return sorted(rows, key=lambda i: i.created_at, reverse=True)

    # ── Booths ───────────────────────────────────────────────────────────

    def list_booth_catalog(self) -> list[Booth]:
        return list(self._booths.values())

    def get_booth(self, booth_id: str) -> Booth | None:
        return self._booths.get(booth_id)

    def seed_booths(self, booths: list[Booth] | None = None) -> int:
        """Load the catalog once. An already populated catalog is left as is."""
        if self._booths:
            logger.info("Booths already seeded (%d)", len(self._booths))
            return len(self._booths)
        if booths is None:
            booths = load_booth_catalog(self.config.booth_catalog_path)
        for booth in booths:
            self._booths[booth.id] = booth
        logger.info("Seeded %d booths", len(booths))
        return len(booths)

    # ── Recommendations ──────────────────────────────────────────────────

    def insert_recommendation(self, record: RecommendationRecord) -> str:
        stored = record.model_copy(update={"id": _new_id()})
        self._recommendations.append(stored)
        return stored.id

    def list_recommendations_for_user(
        self, user_id: str, now: int | None = None, limit: int | None = None,
    ) -> list[RecommendationRecord]:
        """Unexpired recommendations for *user_id*, highest score first."""
        now = now if now is not None else now_ms()
        limit = limit if limit is not None else self.config.recommendations_per_user
        fresh = [
            r for r in self._recommendations
            if r.user_id == user_id and r.expires_at > now
        ]
        return sorted(fresh, key=lambda r: r.score, reverse=True)[:limit]

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> UserProfile | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def upsert_user(self, profile: UserProfile) -> str:
        self._users[profile.user_id] = profile.model_copy(deep=True)
        return profile.user_id
