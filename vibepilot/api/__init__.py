from fastapi import APIRouter

from vibepilot.api import auth, playlists, vibe
from vibepilot.core.config import get_settings
from vibepilot.schemas.user import PublicSettings
from vibepilot.services.vibe.interpreter import is_llm_available

api_router = APIRouter()


@api_router.get("/health", tags=["health"])
def api_health_check():
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "ok", "service": "api"}


@api_router.get("/settings", response_model=PublicSettings, tags=["settings"])
def public_settings() -> PublicSettings:
    """Feature flags for the front end (read-only mode, LLM availability)."""
    return PublicSettings(
        llm_available=is_llm_available(),
        playlist_saving_enabled=get_settings().is_deezer_oauth_configured,
    )


api_router.include_router(vibe.router, prefix="/vibe", tags=["vibe"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["playlists"])
