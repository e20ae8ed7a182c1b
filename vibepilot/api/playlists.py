import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from vibepilot.api.deps import get_current_user, get_db, require_deezer_oauth
from vibepilot.core.config import get_settings
from vibepilot.core.rate_limit import limiter
from vibepilot.models.saved_playlist import SavedPlaylist
from vibepilot.models.user import User
from vibepilot.schemas.playlist import SavedPlaylistOut, SavePlaylistRequest
from vibepilot.services.deezer import RemoteServiceError
from vibepilot.services.playlists import (
    DeezerNotLinkedError,
    default_playlist_title,
    list_saved_playlists,
    save_vibe_playlist,
)
from vibepilot.services.vibe.params import SearchParameters

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


def _playlist_to_out(playlist: SavedPlaylist) -> SavedPlaylistOut:
    return SavedPlaylistOut(
        id=playlist.id,
        title=playlist.title,
        prompt=playlist.prompt,
        deezer_playlist_id=playlist.deezer_playlist_id,
        deezer_link=playlist.deezer_link,
        track_count=playlist.track_count,
        tags=playlist.get_tags(),
        vibe_params=playlist.get_vibe_params(),
        tracks=playlist.get_tracks(),
        created_at=playlist.created_at,
    )


@router.post(
    "",
    response_model=SavedPlaylistOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_deezer_oauth)],
)
@limiter.limit(lambda: f"{settings.playlist_rate_limit_per_minute}/minute")
def save_playlist(
    request: Request,
    save_request: SavePlaylistRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SavedPlaylistOut:
    """Save a vibe's tracks as a playlist on the user's Deezer account."""
    title = save_request.title or default_playlist_title(save_request.prompt)
    params = SearchParameters(**save_request.params.model_dump())

    try:
        saved = save_vibe_playlist(
            db,
            current_user,
            title=title,
            prompt=save_request.prompt,
            tracks=save_request.tracks,
            params=params,
        )
    except DeezerNotLinkedError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Deezer account not linked. Sign in with Deezer again.",
        )
    except RemoteServiceError as e:
        logger.error("Deezer playlist save failed with HTTP %s", e.status_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to save playlist to Deezer (HTTP {e.status_code})",
        )
    except httpx.HTTPError as e:
        logger.error("Deezer playlist save failed: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to save playlist to Deezer",
        )

    return _playlist_to_out(saved)


@router.get("", response_model=list[SavedPlaylistOut])
def playlist_history(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SavedPlaylistOut]:
    """Playlists the current user has saved, newest first."""
    return [_playlist_to_out(p) for p in list_saved_playlists(db, current_user)]
