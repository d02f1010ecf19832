from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    processed = [e for e in events if e["type"] == "interaction_processed"]
    runs = [e for e in events if e["type"] == "recommendations_generated"]
    total_processed = len(processed)
    total_runs = len(runs)

    # Sentiment breakdown
    sentiment_counter: Counter[str] = Counter(
        {"positive": 0, "neutral": 0, "negative": 0}
    )
    for p in processed:
        sentiment_counter[p.get("sentiment", "neutral")] += 1

    fallbacks = sum(1 for p in processed if p.get("enrichment_fallback"))

    # Generation stats
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0
    returned = [r.get("results_returned", 0) for r in runs]
    empty_runs = sum(1 for n in returned if n == 0)

    # Most recommended booths
    booth_counter: Counter[str] = Counter()
    for r in runs:
        for booth_id in r.get("booth_ids", []) or []:
            booth_counter[booth_id] += 1
    top_booths = [{"booth_id": b, "count": c} for b, c in booth_counter.most_common(10)]

    return {
        "total_interactions_processed": total_processed,
        "sentiment_breakdown": dict(sentiment_counter),
        "enrichment_fallback_rate": (
            round(fallbacks / total_processed * 100, 1) if total_processed else 0.0
        ),
        "total_generation_runs": total_runs,
        "empty_generation_runs": empty_runs,
        "avg_recommendations_per_run": (
            round(sum(returned) / total_runs, 2) if total_runs else 0.0
        ),
        "avg_generation_time_ms": avg_time,
        "top_recommended_booths": top_booths,
    }
