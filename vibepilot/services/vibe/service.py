"""Vibe generation pipeline.

1. Claude interprets the prompt into SearchParameters
2. Deezer is searched with the composed query
3. On zero results, one simplified search is tried and noted in the explanation

Steps run in sequence; errors from either service propagate to the caller.
"""

import logging
from dataclasses import dataclass, field

from vibepilot.core.config import get_settings
from vibepilot.schemas.deezer import DeezerTrack
from vibepilot.services.deezer import search_with_fallback
from vibepilot.services.vibe.interpreter import interpret_vibe
from vibepilot.services.vibe.params import SearchParameters

logger = logging.getLogger(__name__)


@dataclass
class VibeResult:
    """Explanation, resolved parameters and tracks for one vibe request."""

    explanation: str
    params: SearchParameters
    tracks: list[DeezerTrack] = field(default_factory=list)
    fallback_query: str | None = None


def note_simplified_search(explanation: str, simplified_query: str) -> str:
    return f'{explanation} (Used simplified search: "{simplified_query}")'


async def generate_vibe(prompt: str, limit: int | None = None) -> VibeResult:
    """Turn a free-text vibe into Deezer tracks."""
    if limit is None:
        limit = get_settings().deezer_search_limit

    params = await interpret_vibe(prompt)
    outcome = await search_with_fallback(params, limit)

    explanation = params.explanation
    if outcome.fallback_query:
        explanation = note_simplified_search(explanation, outcome.fallback_query)

    if not outcome.tracks:
        logger.info("No Deezer tracks found for vibe %r", prompt[:80])

    return VibeResult(
        explanation=explanation,
        params=params,
        tracks=outcome.tracks,
        fallback_query=outcome.fallback_query,
    )
