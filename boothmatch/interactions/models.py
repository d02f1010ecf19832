from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..recommendations.models import Sentiment


class ConnectionPotential(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class EnrichedInteraction(BaseModel):
    summary: str = "Interaction recorded"
    tags: list[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.neutral
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    key_topics: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    mentioned_skills: list[str] = Field(default_factory=list)
    mentioned_interests: list[str] = Field(default_factory=list)
    connection_potential: ConnectionPotential = ConnectionPotential.medium
    suggested_follow_up: str = "Follow up soon"
    is_fallback: bool = False


class ProcessInteractionRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    booth_id: str = Field(..., min_length=1)
    booth_name: str = Field(..., min_length=1)
    transcript: str = Field(..., min_length=1)
    has_audio: bool = False
    recording_duration_sec: float = Field(default=0.0, ge=0.0)


class ProcessInteractionResponse(BaseModel):
    interaction_id: str
    interaction_number: int
    enrichment: EnrichedInteraction
    recommendation_ids: list[str] = Field(default_factory=list)
