import logging

import anthropic
import httpx
from fastapi import APIRouter, HTTPException, Request, status

from vibepilot.core.config import get_settings
from vibepilot.core.rate_limit import limiter
from vibepilot.schemas.vibe import (
    SearchParametersOut,
    VibeMetricsOut,
    VibeRequest,
    VibeResponse,
)
from vibepilot.services.deezer import RemoteServiceError
from vibepilot.services.vibe.interpreter import SchemaValidationError, is_llm_available
from vibepilot.services.vibe.metrics import compute_vibe_metrics
from vibepilot.services.vibe.service import generate_vibe

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


@router.post("", response_model=VibeResponse)
@limiter.limit(lambda: f"{settings.vibe_rate_limit_per_minute}/minute")
async def create_vibe(request: Request, vibe_request: VibeRequest) -> VibeResponse:
    """Interpret a vibe description and return matching Deezer tracks."""
    if not is_llm_available():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Vibe generation is not configured",
        )

    try:
        result = await generate_vibe(vibe_request.prompt)
    except SchemaValidationError as e:
        logger.warning("Vibe interpretation returned invalid parameters: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not understand the vibe. Try rephrasing it.",
        )
    except RemoteServiceError as e:
        logger.error("Deezer search failed with HTTP %s", e.status_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Deezer search failed (HTTP {e.status_code})",
        )
    except httpx.HTTPError as e:
        logger.error("Deezer search request failed: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Deezer search is unavailable",
        )
    except anthropic.APIError as e:
        logger.error("Vibe interpretation failed: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Vibe interpretation service is unavailable",
        )

    metrics = compute_vibe_metrics(result)
    return VibeResponse(
        explanation=result.explanation,
        params=SearchParametersOut(**result.params.to_dict()),
        tracks=result.tracks,
        metrics=VibeMetricsOut(
            energy=metrics.energy,
            popularity=metrics.popularity,
            tempo=metrics.tempo,
            mood=metrics.mood,
        ),
        fallback_query=result.fallback_query,
    )
