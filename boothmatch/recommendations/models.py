from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Sentiment(str, Enum):
    positive = "positive"
    neutral = "neutral"
    negative = "negative"


class InteractionRecord(BaseModel):
    id: str | None = None
    user_id: str = Field(..., min_length=1)
    booth_id: str = Field(..., min_length=1)
    booth_name: str = ""
    transcript: str | None = None
    summary: str | None = None
    sentiment: Sentiment = Sentiment.neutral
    tags: list[str] = Field(default_factory=list)
    mentioned_skills: list[str] = Field(default_factory=list)
    mentioned_interests: list[str] = Field(default_factory=list)
    has_audio: bool = False
    recording_duration_sec: float = 0.0
    created_at: int = 0

    @field_validator("tags", "mentioned_skills", "mentioned_interests", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("sentiment", mode="before")
    @classmethod
    def _unknown_sentiment_as_neutral(cls, value):
        if isinstance(value, Sentiment):
            return value
        if value not in {s.value for s in Sentiment}:
            return Sentiment.neutral
        return value


class InteractionCreate(BaseModel):
    """Body for inserting an interaction that was enriched elsewhere."""

    user_id: str = Field(..., min_length=1)
    booth_id: str = Field(..., min_length=1)
    booth_name: str = ""
    transcript: str | None = None
    summary: str | None = None
    sentiment: Sentiment = Sentiment.neutral
    tags: list[str] | None = None
    mentioned_skills: list[str] | None = None
    mentioned_interests: list[str] | None = None


class Booth(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    company: str = ""
    description: str | None = None
    location: str | None = None
    tags: list[str] = Field(default_factory=list)
    looking_for: list[str] = Field(default_factory=list)

    @field_validator("tags", "looking_for", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class ScoredBooth(BaseModel):
    booth: Booth
    score: int = Field(..., ge=0, le=100)
    match_reasons: list[str] = Field(default_factory=list, max_length=3)
    based_on_tags: list[str] = Field(default_factory=list)


class RecommendationRecord(BaseModel):
    id: str | None = None
    user_id: str
    booth_id: str
    score: int
    reasoning: list[str]
    based_on: str
    created_at: int
    expires_at: int


class RecommendationBatch(BaseModel):
    recommendations: list[ScoredBooth]
    recommendation_ids: list[str]


class StoredRecommendationsResponse(BaseModel):
    recommendations: list[RecommendationRecord]


class SeedResponse(BaseModel):
    status: str
    booths: int
