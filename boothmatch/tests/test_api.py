from __future__ import annotations

from fastapi.testclient import TestClient

from boothmatch.analytics.store import EventLog
from boothmatch.app import app, get_event_log, get_llm_config, get_store
from boothmatch.llm.config import LLMConfig
from boothmatch.storage.data_store import InMemoryStore

client = TestClient(app)


def _fresh_store(llm_config: LLMConfig | None = None) -> InMemoryStore:
    store = InMemoryStore()
    app.dependency_overrides[get_store] = lambda: store
    events = EventLog()
    app.dependency_overrides[get_event_log] = lambda: events
    app.dependency_overrides[get_llm_config] = lambda: llm_config or LLMConfig(enabled=False)
    return store


def _seed(c):
    c.post("/booths/seed")


def _add_interaction(c, booth_id, **fields):
    body = {"user_id": "user_1", "booth_id": booth_id, **fields}
    return c.post("/interactions", json=body)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ── Booths ───────────────────────────────────────────────────────────────


def test_seed_and_list_booths():
    _fresh_store()
    resp = client.post("/booths/seed")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "booths": 6}

    # seeding twice keeps the catalog as is
    assert client.post("/booths/seed").json()["booths"] == 6
    booths = client.get("/booths").json()
    assert len(booths) == 6
    assert booths[0]["id"] == "techcorp-ai"


def test_get_booth_unknown():
    _fresh_store()
    assert client.get("/booths/nope").status_code == 404


# ── Interactions ─────────────────────────────────────────────────────────


def test_create_interaction_assigns_id_and_timestamp():
    _fresh_store()
    resp = _add_interaction(client, "designlab", tags=None, sentiment="positive")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"]
    assert body["created_at"] > 0
    assert body["tags"] == []


def test_create_interaction_validation_rejects_empty_user():
    _fresh_store()
    resp = client.post("/interactions", json={"user_id": "", "booth_id": "b1"})
    assert resp.status_code == 422


def test_user_tags_summary():
    _fresh_store()
    _add_interaction(client, "b1", tags=["ai", "web"], sentiment="positive")
    _add_interaction(client, "b2", tags=["web"])
    body = client.get("/users/user_1/tags").json()
    assert body["tags"][0] == {"tag": "web", "count": 2}
    assert body["total_interactions"] == 2
    assert body["positive_ratio"] == 0.5


def test_process_interaction_with_enrichment_disabled():
    _fresh_store()
    _seed(client)
    resp = client.post("/interactions/process", json={
        "user_id": "user_1",
        "booth_id": "techcorp-ai",
        "booth_name": "TechCorp AI",
        "transcript": "Hello there",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["interaction_number"] == 1
    assert body["enrichment"]["sentiment"] == "neutral"
    assert body["recommendation_ids"] == []


def test_process_interaction_missing_key_is_503():
    _fresh_store(LLMConfig(api_key="", enabled=True))
    resp = client.post("/interactions/process", json={
        "user_id": "user_1",
        "booth_id": "techcorp-ai",
        "booth_name": "TechCorp AI",
        "transcript": "Hello there",
    })
    assert resp.status_code == 503


# ── Recommendations ──────────────────────────────────────────────────────


def test_recommendations_empty_without_history():
    _fresh_store()
    _seed(client)
    resp = client.post("/users/user_1/recommendations")
    assert resp.status_code == 200
    assert resp.json() == {"recommendations": [], "recommendation_ids": []}


def test_recommendations_skip_visited_and_are_ordered():
    _fresh_store()
    _seed(client)
    _add_interaction(
        client, "techcorp-ai",
        tags=["ai", "design", "cloud"],
        mentioned_skills=["figma", "kubernetes", "aws"],
    )

    body = client.post("/users/user_1/recommendations").json()

    ids = [r["booth"]["id"] for r in body["recommendations"]]
    assert "techcorp-ai" not in ids
    assert ids == ["cloudscale", "designlab"]
    scores = [r["score"] for r in body["recommendations"]]
    assert scores == sorted(scores, reverse=True)
    assert all(0 <= s <= 100 for s in scores)
    assert all(len(r["match_reasons"]) <= 3 for r in body["recommendations"])
    assert len(body["recommendation_ids"]) == 2


def test_stored_recommendations_returned_by_score():
    _fresh_store()
    _seed(client)
    _add_interaction(client, "startupxyz", tags=["design", "cloud"], mentioned_skills=["aws"])
    client.post("/users/user_1/recommendations")

    body = client.get("/users/user_1/recommendations").json()

    booth_ids = [r["booth_id"] for r in body["recommendations"]]
    assert booth_ids == ["cloudscale", "designlab"]
    assert body["recommendations"][0]["based_on"] == "design, cloud"
    first = body["recommendations"][0]
    assert first["expires_at"] - first["created_at"] == 24 * 60 * 60 * 1000


# ── Profiles ─────────────────────────────────────────────────────────────


def test_profile_lifecycle():
    _fresh_store()
    assert client.get("/users/user_1/profile").status_code == 404

    resp = client.put("/users/user_1/profile", json={
        "email": "ada@example.com",
        "name": "Ada",
        "identity": {"headline": "ML student", "skills": ["python"], "interests": []},
    })
    assert resp.status_code == 200

    resp = client.post("/users/user_1/identity/evolve", json={
        "new_skills": ["python", "rust"], "new_interests": ["robotics"],
    })
    assert resp.status_code == 200
    identity = resp.json()["identity"]
    assert identity["skills"] == ["python", "rust"]
    assert identity["interests"] == ["robotics"]

    resp = client.patch("/users/user_1/identity", json={"goals": ["internship"]})
    assert resp.json()["identity"]["goals"] == ["internship"]
    assert resp.json()["identity"]["skills"] == ["python", "rust"]


def test_identity_endpoints_unknown_user():
    _fresh_store()
    assert client.patch("/users/ghost/identity", json={}).status_code == 404
    assert client.post("/users/ghost/identity/evolve", json={}).status_code == 404


def test_profile_validation_rejects_missing_email():
    _fresh_store()
    resp = client.put("/users/user_1/profile", json={"name": "Ada"})
    assert resp.status_code == 422
