from __future__ import annotations

from boothmatch.identity.evolution import (
    evolve_user_identity,
    merge_terms,
    should_generate_recommendations,
    summarize_tags,
)
from boothmatch.identity.models import (
    Identity,
    IdentityFieldsUpdate,
    ProfileUpsertRequest,
    UserProfile,
)
from boothmatch.identity.profiles import merge_identity_fields, upsert_profile
from boothmatch.recommendations.models import InteractionRecord
from boothmatch.storage.data_store import InMemoryStore


class CountingStore(InMemoryStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def upsert_user(self, profile):
        self.writes += 1
        return super().upsert_user(profile)


def _store_with_user(skills=(), interests=(), identity=True):
    store = CountingStore()
    store.upsert_user(UserProfile(
        user_id="user_1",
        email="ada@example.com",
        name="Ada",
        identity=Identity(skills=list(skills), interests=list(interests)) if identity else None,
    ))
    store.writes = 0
    return store


# ── Cadence ──────────────────────────────────────────────────────────────


def test_cadence_first_and_even_interactions():
    assert [n for n in range(1, 9) if should_generate_recommendations(n)] == [1, 2, 4, 6, 8]


# ── Evolution ────────────────────────────────────────────────────────────


def test_merge_terms_is_ordered_exact_union():
    assert merge_terms(["python", "go"], ["Go", "go", "rust"]) == ["python", "go", "Go", "rust"]


def test_evolve_appends_new_values():
    store = _store_with_user(skills=["python"], interests=["ai"])

    assert evolve_user_identity(store, "user_1", ["python", "rust"], ["music"], now=5) == "user_1"

    user = store.get_user("user_1")
    assert user.identity.skills == ["python", "rust"]
    assert user.identity.interests == ["ai", "music"]
    assert user.identity.last_updated == 5
    assert user.updated_at == 5
    assert store.writes == 1


def test_evolve_without_changes_does_not_write():
    store = _store_with_user(skills=["python"], interests=["ai"])

    evolve_user_identity(store, "user_1", ["python"], ["ai"])

    assert store.writes == 0


def test_evolve_never_removes_values():
    store = _store_with_user(skills=["python", "go"], interests=["ai"])

    evolve_user_identity(store, "user_1", [], ["web"])

    user = store.get_user("user_1")
    assert user.identity.skills == ["python", "go"]
    assert user.identity.interests == ["ai", "web"]


def test_evolve_starts_from_empty_identity():
    store = _store_with_user(identity=False)

    evolve_user_identity(store, "user_1", ["figma"], [])

    assert store.get_user("user_1").identity.skills == ["figma"]


def test_evolve_unknown_user_returns_none():
    assert evolve_user_identity(InMemoryStore(), "ghost", ["python"], []) is None


# ── Tag summary ──────────────────────────────────────────────────────────


def test_summarize_tags():
    interactions = [
        InteractionRecord(user_id="u", booth_id="b1", tags=["ai", "web"], sentiment="positive"),
        InteractionRecord(user_id="u", booth_id="b2", tags=["web"], sentiment="negative"),
    ]
    summary = summarize_tags(interactions)
    assert [(t.tag, t.count) for t in summary.tags] == [("web", 2), ("ai", 1)]
    assert summary.total_interactions == 2
    assert summary.positive_ratio == 0.5


def test_summarize_tags_empty():
    summary = summarize_tags([])
    assert summary.tags == []
    assert summary.positive_ratio == 0.0


# ── Profiles ─────────────────────────────────────────────────────────────


def test_upsert_profile_creates_then_patches():
    store = InMemoryStore()
    body = ProfileUpsertRequest(
        email="ada@example.com", name="Ada", identity=Identity(skills=["python"]),
    )
    created = upsert_profile(store, "user_1", body, now=10)
    assert created.created_at == 10
    assert created.identity.last_updated == 10

    updated = upsert_profile(
        store, "user_1", ProfileUpsertRequest(email="ada@new.dev", name="Ada L."), now=20,
    )
    assert updated.email == "ada@new.dev"
    assert updated.created_at == 10
    assert updated.updated_at == 20
    # identity is kept when the update doesn't carry one
    assert updated.identity.skills == ["python"]


def test_merge_identity_fields_only_touches_given_fields():
    store = _store_with_user(skills=["python"], interests=["ai"])

    profile = merge_identity_fields(
        store, "user_1", IdentityFieldsUpdate(goals=["find an internship"]), now=7,
    )

    assert profile.identity.goals == ["find an internship"]
    assert profile.identity.skills == ["python"]
    assert profile.identity.interests == ["ai"]
    assert profile.identity.last_updated == 7


def test_merge_identity_fields_creates_default_identity():
    store = _store_with_user(identity=False)

    profile = merge_identity_fields(store, "user_1", IdentityFieldsUpdate(skills=["go"]))

    assert profile.identity.headline == "Hackathon Attendee"
    assert profile.identity.skills == ["go"]


def test_merge_identity_fields_unknown_user():
    assert merge_identity_fields(InMemoryStore(), "ghost", IdentityFieldsUpdate()) is None
