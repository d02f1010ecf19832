from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

from groq import Groq
from pydantic import ValidationError

from ..interactions.models import ConnectionPotential, EnrichedInteraction
from ..recommendations.models import Sentiment
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

MAX_TAGS = 5
MAX_CONTEXT_TAGS = 5
DEFAULT_FOLLOW_UP = "Find someone with complementary skills to expand your network"
ANALYSIS_FAILED_SUMMARY = "Analysis failed; transcript saved without insights"

SYSTEM_PROMPT = (
    "You are an AI networking coach at a hackathon / career fair. "
    "Given the transcript of one conversation between an attendee and a booth, "
    "analyse THIS conversation and suggest what the attendee should do next.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    "{\n"
    '  "summary": "1-2 sentence summary of this conversation",\n'
    '  "tags": ["lowercase-hyphenated-topic", "..."],\n'
    '  "sentiment": "positive" | "neutral" | "negative",\n'
    '  "confidence": 0.0-1.0,\n'
    '  "key_topics": ["main topic", "..."],\n'
    '  "action_items": ["action based on this conversation"],\n'
    '  "mentioned_skills": ["skills mentioned in this transcript"],\n'
    '  "mentioned_interests": ["interests mentioned in this transcript"],\n'
    '  "connection_potential": "high" | "medium" | "low",\n'
    '  "suggested_follow_up": "next best action based on this conversation"\n'
    "}\n\n"
    "The follow-up must relate directly to what was discussed. "
    "Do not suggest things the transcript never mentions."
)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class LLMConfigurationError(RuntimeError):
    """Raised when enrichment is enabled but no API key is configured."""


def _build_user_message(
    transcript: str,
    booth_name: str,
    previous_tags: Sequence[str],
) -> str:
    lines = [f"## Booth\n{booth_name}", "", "## Transcript", '"""', transcript, '"""']
    if previous_tags:
        lines.append(
            "\n(For context only - previous topics discussed: "
            f"{', '.join(previous_tags[:MAX_CONTEXT_TAGS])})"
        )
    return "\n".join(lines)


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str) and v.strip()]


def _string_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value.strip() else default


def default_enrichment(summary: str | None = None) -> EnrichedInteraction:
    return EnrichedInteraction(
        summary=summary or "Interaction recorded",
        suggested_follow_up=DEFAULT_FOLLOW_UP,
        is_fallback=True,
    )


def parse_enrichment(content: str) -> EnrichedInteraction:
    """Turn raw model output into an ``EnrichedInteraction``, tolerating sloppy JSON."""
    match = _JSON_OBJECT_RE.search(content)
    if not match:
        logger.warning("No JSON object found in LLM response")
        return default_enrichment()

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning("Could not parse LLM response as JSON", exc_info=True)
        return default_enrichment()
    if not isinstance(parsed, dict):
        return default_enrichment()

    sentiment = parsed.get("sentiment")
    if not (isinstance(sentiment, str) and sentiment in {s.value for s in Sentiment}):
        sentiment = Sentiment.neutral.value

    confidence = parsed.get("confidence")
    if isinstance(confidence, (int, float)) and not isinstance(confidence, bool):
        confidence = max(0.0, min(1.0, float(confidence)))
    else:
        confidence = 0.5

    potential = parsed.get("connection_potential")
    if not (isinstance(potential, str) and potential in {p.value for p in ConnectionPotential}):
        potential = ConnectionPotential.medium.value

    try:
        return EnrichedInteraction(
            summary=_string_or(parsed.get("summary"), "Interaction recorded"),
            tags=_string_list(parsed.get("tags"))[:MAX_TAGS],
            sentiment=sentiment,
            confidence=confidence,
            key_topics=_string_list(parsed.get("key_topics")),
            action_items=_string_list(parsed.get("action_items")),
            mentioned_skills=_string_list(parsed.get("mentioned_skills")),
            mentioned_interests=_string_list(parsed.get("mentioned_interests")),
            connection_potential=potential,
            suggested_follow_up=_string_or(parsed.get("suggested_follow_up"), DEFAULT_FOLLOW_UP),
        )
    except (ValidationError, TypeError):
        logger.warning("LLM response did not match the enrichment shape", exc_info=True)
        return default_enrichment()


def enrich_transcript(
    transcript: str,
    booth_name: str,
    previous_tags: Sequence[str] = (),
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> EnrichedInteraction:
    """
    Call Groq LLM to extract structured insights from a conversation transcript.

    Returns a neutral fallback record on any API or parsing failure.
    Raises ``LLMConfigurationError`` when enabled without an API key.
    """
    if not config.enabled:
        return default_enrichment()

    if not config.api_key:
        raise LLMConfigurationError("GROQ_API_KEY is missing; set it or disable enrichment")

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": _build_user_message(transcript, booth_name, previous_tags),
                },
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or ""

    except Exception:
        logger.warning("Groq LLM call failed, using neutral enrichment", exc_info=True)
        return default_enrichment(ANALYSIS_FAILED_SUMMARY)

    return parse_enrichment(content)
