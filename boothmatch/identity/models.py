from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_HEADLINE = "Hackathon Attendee"


class Identity(BaseModel):
    headline: str = DEFAULT_HEADLINE
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    target_roles: list[str] | None = None
    looking_for: list[str] | None = None
    last_updated: int | None = None


class UserProfile(BaseModel):
    user_id: str = Field(..., min_length=1, description="Identity-provider user id")
    email: str = ""
    name: str = ""
    resume_text: str | None = None
    identity: Identity | None = None
    created_at: int = 0
    updated_at: int | None = None


class ProfileUpsertRequest(BaseModel):
    email: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    resume_text: str | None = None
    identity: Identity | None = None


class IdentityFieldsUpdate(BaseModel):
    skills: list[str] | None = None
    interests: list[str] | None = None
    goals: list[str] | None = None
    target_roles: list[str] | None = None
    looking_for: list[str] | None = None


class EvolveIdentityRequest(BaseModel):
    new_skills: list[str] = Field(default_factory=list)
    new_interests: list[str] = Field(default_factory=list)


class TagCount(BaseModel):
    tag: str
    count: int


class TagSummary(BaseModel):
    tags: list[TagCount]
    total_interactions: int
    positive_ratio: float
