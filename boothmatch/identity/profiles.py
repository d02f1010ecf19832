from __future__ import annotations

from ..recommendations.engine import now_ms
from .evolution import UserStore
from .models import Identity, IdentityFieldsUpdate, ProfileUpsertRequest, UserProfile


def upsert_profile(
    store: UserStore,
    user_id: str,
    body: ProfileUpsertRequest,
    now: int | None = None,
) -> UserProfile:
    """Create the profile or patch contact details; identity is replaced only when given."""
    stamp = now if now is not None else now_ms()
    identity = body.identity.model_copy(update={"last_updated": stamp}) if body.identity else None

    existing = store.get_user(user_id)
    if existing:
        profile = existing.model_copy(update={
            "email": body.email,
            "name": body.name,
            "resume_text": body.resume_text,
            "identity": identity or existing.identity,
            "updated_at": stamp,
        })
    else:
        profile = UserProfile(
            user_id=user_id,
            email=body.email,
            name=body.name,
            resume_text=body.resume_text,
            identity=identity,
            created_at=stamp,
            updated_at=stamp,
        )
    store.upsert_user(profile)
    return profile


def merge_identity_fields(
    store: UserStore,
    user_id: str,
    fields: IdentityFieldsUpdate,
    now: int | None = None,
) -> UserProfile | None:
    """Overwrite only the identity fields that were provided."""
    existing = store.get_user(user_id)
    if existing is None:
        return None

    stamp = now if now is not None else now_ms()
    current = existing.identity or Identity(last_updated=stamp)
    updates = fields.model_dump(exclude_none=True)
    updates["last_updated"] = stamp

    profile = existing.model_copy(update={
        "identity": current.model_copy(update=updates),
        "updated_at": stamp,
    })
    store.upsert_user(profile)
    return profile
