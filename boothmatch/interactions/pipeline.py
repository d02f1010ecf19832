from __future__ import annotations

import logging

from ..analytics.store import EventLog
from ..identity.evolution import evolve_user_identity, should_generate_recommendations
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.groq_client import enrich_transcript
from ..recommendations.config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from ..recommendations.engine import generate_for_user
from ..recommendations.models import InteractionRecord
from ..storage.data_store import InMemoryStore
from .models import ProcessInteractionRequest, ProcessInteractionResponse

logger = logging.getLogger(__name__)

MAX_PREVIOUS_TAGS = 10


def process_interaction(
    request: ProcessInteractionRequest,
    store: InMemoryStore,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    rec_config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    events: EventLog | None = None,
) -> ProcessInteractionResponse:
    """Enrich, store and learn from one booth conversation."""
    # --- History context ---
    previous = store.list_interactions_by_user(request.user_id)
    previous_tags = list(dict.fromkeys(t for i in previous for t in i.tags))

    # --- Enrichment (neutral record on failure) ---
    enriched = enrich_transcript(
        request.transcript,
        request.booth_name,
        previous_tags[:MAX_PREVIOUS_TAGS],
        config=llm_config,
    )

    interaction_id = store.insert_interaction(InteractionRecord(
        user_id=request.user_id,
        booth_id=request.booth_id,
        booth_name=request.booth_name,
        transcript=request.transcript,
        has_audio=request.has_audio,
        recording_duration_sec=request.recording_duration_sec,
        summary=enriched.summary,
        sentiment=enriched.sentiment,
        tags=enriched.tags,
        mentioned_skills=enriched.mentioned_skills,
        mentioned_interests=enriched.mentioned_interests,
    ))
    logger.info("Saved interaction %s for %s", interaction_id, request.user_id)

    # --- Identity feedback loop ---
    if enriched.mentioned_skills or enriched.mentioned_interests:
        evolve_user_identity(
            store,
            request.user_id,
            enriched.mentioned_skills,
            enriched.mentioned_interests,
        )

    # --- Recommendation cadence ---
    interaction_number = len(previous) + 1
    recommendation_ids: list[str] = []
    if should_generate_recommendations(interaction_number):
        try:
            batch = generate_for_user(request.user_id, store, rec_config, events=events)
            recommendation_ids = batch.recommendation_ids
        except Exception:
            logger.exception("Recommendation generation failed for %s", request.user_id)

    if events is not None:
        events.record("interaction_processed", {
            "user_id": request.user_id,
            "booth_id": request.booth_id,
            "sentiment": enriched.sentiment.value,
            "enrichment_fallback": enriched.is_fallback,
            "interaction_number": interaction_number,
            "recommendations_generated": len(recommendation_ids),
        })

    return ProcessInteractionResponse(
        interaction_id=interaction_id,
        interaction_number=interaction_number,
        enrichment=enriched,
        recommendation_ids=recommendation_ids,
    )
