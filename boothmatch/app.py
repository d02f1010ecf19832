from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import EventLog
from .identity.evolution import evolve_user_identity, summarize_tags
from .identity.models import (
    EvolveIdentityRequest,
    IdentityFieldsUpdate,
    ProfileUpsertRequest,
    TagSummary,
    UserProfile,
)
from .identity.profiles import merge_identity_fields, upsert_profile
from .interactions.models import ProcessInteractionRequest, ProcessInteractionResponse
from .interactions.pipeline import process_interaction
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .llm.groq_client import LLMConfigurationError
from .recommendations.engine import generate_for_user
from .recommendations.models import (
    Booth,
    InteractionCreate,
    InteractionRecord,
    RecommendationBatch,
    SeedResponse,
    StoredRecommendationsResponse,
)
from .storage.data_store import InMemoryStore

app = FastAPI(title="BoothMatch Networking API", version="1.0.0")

_store = InMemoryStore()
_events = EventLog()


def get_store() -> InMemoryStore:
    return _store


def get_event_log() -> EventLog:
    return _events


def get_llm_config() -> LLMConfig:
    return DEFAULT_LLM_CONFIG


def _require_user(store: InMemoryStore, user_id: str) -> UserProfile:
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Booth catalog ────────────────────────────────────────────────────────


@app.get("/booths", response_model=list[Booth])
def list_booths(store: InMemoryStore = Depends(get_store)) -> list[Booth]:
    return store.list_booth_catalog()


@app.post("/booths/seed", response_model=SeedResponse)
def seed_booths(store: InMemoryStore = Depends(get_store)) -> SeedResponse:
    return SeedResponse(status="ok", booths=store.seed_booths())


@app.get("/booths/{booth_id}", response_model=Booth)
def get_booth(booth_id: str, store: InMemoryStore = Depends(get_store)) -> Booth:
    booth = store.get_booth(booth_id)
    if booth is None:
        raise HTTPException(status_code=404, detail="Booth not found")
    return booth


# ── Interactions ─────────────────────────────────────────────────────────


@app.post("/interactions", response_model=InteractionRecord)
def create_interaction(
    body: InteractionCreate,
    store: InMemoryStore = Depends(get_store),
) -> InteractionRecord:
    record = InteractionRecord(**body.model_dump())
    interaction_id = store.insert_interaction(record)
    return store.get_interaction(interaction_id)


@app.post("/interactions/process", response_model=ProcessInteractionResponse)
def process(
    body: ProcessInteractionRequest,
    store: InMemoryStore = Depends(get_store),
    llm_config: LLMConfig = Depends(get_llm_config),
    events: EventLog = Depends(get_event_log),
) -> ProcessInteractionResponse:
    try:
        return process_interaction(body, store, llm_config, events=events)
    except LLMConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@app.get("/users/{user_id}/interactions", response_model=list[InteractionRecord])
def list_interactions(
    user_id: str,
    store: InMemoryStore = Depends(get_store),
) -> list[InteractionRecord]:
    return store.list_interactions_by_user(user_id)


@app.get("/users/{user_id}/tags", response_model=TagSummary)
def user_tags(user_id: str, store: InMemoryStore = Depends(get_store)) -> TagSummary:
    return summarize_tags(store.list_interactions_by_user(user_id))


# ── Recommendations ──────────────────────────────────────────────────────


@app.post("/users/{user_id}/recommendations", response_model=RecommendationBatch)
def generate(
    user_id: str,
    store: InMemoryStore = Depends(get_store),
    events: EventLog = Depends(get_event_log),
) -> RecommendationBatch:
    return generate_for_user(user_id, store, events=events)


@app.get("/users/{user_id}/recommendations", response_model=StoredRecommendationsResponse)
def stored_recommendations(
    user_id: str,
    store: InMemoryStore = Depends(get_store),
) -> StoredRecommendationsResponse:
    return StoredRecommendationsResponse(
        recommendations=store.list_recommendations_for_user(user_id),
    )


# ── Profiles & identity ──────────────────────────────────────────────────


@app.put("/users/{user_id}/profile", response_model=UserProfile)
def put_profile(
    user_id: str,
    body: ProfileUpsertRequest,
    store: InMemoryStore = Depends(get_store),
) -> UserProfile:
    return upsert_profile(store, user_id, body)


@app.get("/users/{user_id}/profile", response_model=UserProfile)
def get_profile(user_id: str, store: InMemoryStore = Depends(get_store)) -> UserProfile:
    return _require_user(store, user_id)


@app.patch("/users/{user_id}/identity", response_model=UserProfile)
def patch_identity(
    user_id: str,
    body: IdentityFieldsUpdate,
    store: InMemoryStore = Depends(get_store),
) -> UserProfile:
    profile = merge_identity_fields(store, user_id, body)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@app.post("/users/{user_id}/identity/evolve", response_model=UserProfile)
def evolve_identity(
    user_id: str,
    body: EvolveIdentityRequest,
    store: InMemoryStore = Depends(get_store),
) -> UserProfile:
    if evolve_user_identity(store, user_id, body.new_skills, body.new_interests) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return _require_user(store, user_id)


# ── Analytics ────────────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(events: EventLog = Depends(get_event_log)) -> dict:
    return compute_analytics(events.events())
