"""Vibe interpretation via Claude.

Sends the user's free-text vibe to Claude with a forced tool call whose
input schema is the Deezer search parameter set. The tool input is validated
and returned as SearchParameters; anything that does not fit the schema is a
SchemaValidationError and is not retried.
"""

import logging

from anthropic import AsyncAnthropic
from pydantic import BaseModel, ValidationError, field_validator

from vibepilot.core.config import get_settings
from vibepilot.services.vibe.params import SearchParameters

logger = logging.getLogger(__name__)

TOOL_NAME = "vibe_search_params"

SYSTEM_PROMPT = """\
You are a Vibe Agent for Deezer. Your goal is to translate abstract user moods
and descriptions into technical search parameters for the Deezer search API.

Rules for building the search query:
1. Always include artist names when mentioned - they are the most important search terms
2. For "songs like X" or "similar to X", use the artist name as the primary search term
3. For "discover more [genre] like [artist]", put the artist name first, then the genre
4. Keep queries to 2-4 words - Deezer search works best with concise queries
5. Remove filler words like "songs", "music", "tracks", "like", "similar", "discover", "more"
6. If both artist and genre are mentioned, use the "artist genre" format

Query examples:
- "Japanese rock" -> "Japanese rock"
- "hyperpop songs like glaive" -> "glaive hyperpop"
- "I want to discover more hyperpop songs like the artist glaive" -> "glaive hyperpop"
- "songs similar to glaive" -> "glaive"
- "late night focus, synthwave" -> "synthwave instrumental"

Deezer search supports bpm_min and bpm_max filters. Estimate a BPM range when
the vibe implies energy or tempo (e.g. "fast" -> 130+, "chill" -> 80-110).
Only set genre_id when you know the matching Deezer genre id.

Always give a short explanation of your search strategy and what you
extracted from the user's request."""

VIBE_SEARCH_TOOL = {
    "name": TOOL_NAME,
    "description": "Return Deezer search parameters that match the user's vibe.",
    "input_schema": {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search terms for the music (artist, genre, mood keywords)",
            },
            "bpm_min": {
                "type": "integer",
                "description": "Minimum BPM if the mood implies energy or tempo",
            },
            "bpm_max": {
                "type": "integer",
                "description": "Maximum BPM",
            },
            "genre_id": {
                "type": "integer",
                "description": "Deezer genre id if applicable",
            },
            "explanation": {
                "type": "string",
                "description": "Short explanation of why these parameters were chosen",
            },
        },
        "required": ["query", "explanation"],
    },
}


class SchemaValidationError(Exception):
    """The model's response did not match the search parameter schema."""


class _VibeToolInput(BaseModel):
    query: str
    bpm_min: int | None = None
    bpm_max: int | None = None
    genre_id: int | None = None
    explanation: str

    @field_validator("bpm_min", "bpm_max", "genre_id", mode="before")
    @classmethod
    def _reject_non_numbers(cls, value):
        # Whole-number floats pass; booleans and numeric strings do not
        if isinstance(value, (bool, str)):
            raise ValueError("must be an integer")
        return value


def _parse_tool_response(response) -> SearchParameters:
    """Extract and validate the forced tool call from a Claude response."""
    for block in response.content:
        if block.type == "tool_use" and block.name == TOOL_NAME:
            try:
                payload = _VibeToolInput.model_validate(block.input)
            except ValidationError as e:
                raise SchemaValidationError(str(e)) from e
            return SearchParameters(
                query=payload.query,
                bpm_min=payload.bpm_min,
                bpm_max=payload.bpm_max,
                genre_id=payload.genre_id,
                explanation=payload.explanation,
            )

    raise SchemaValidationError(f"Response contained no {TOOL_NAME} tool call")


async def interpret_vibe(prompt: str) -> SearchParameters:
    """Ask Claude to turn a vibe description into search parameters.

    Raises SchemaValidationError if the response does not conform; API
    failures from the Anthropic client propagate unchanged.
    """
    settings = get_settings()

    client = AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.anthropic_timeout_seconds,
    )

    response = await client.messages.create(
        model=settings.anthropic_model,
        max_tokens=settings.anthropic_max_tokens,
        system=SYSTEM_PROMPT,
        tools=[VIBE_SEARCH_TOOL],
        tool_choice={"type": "tool", "name": TOOL_NAME},
        messages=[{"role": "user", "content": prompt}],
    )

    params = _parse_tool_response(response)
    logger.info(
        "Interpreted vibe %r as query=%r bpm=%s-%s",
        prompt[:80],
        params.query,
        params.bpm_min,
        params.bpm_max,
    )
    return params


def is_llm_available() -> bool:
    """Check if vibe interpretation is configured."""
    return bool(get_settings().anthropic_api_key)
