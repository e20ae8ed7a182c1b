"""Saving vibes as Deezer playlists and keeping the playlist history."""

import json
import logging

import httpx
from sqlalchemy.orm import Session

from vibepilot.models.saved_playlist import SavedPlaylist
from vibepilot.models.user import User
from vibepilot.schemas.deezer import DeezerTrack
from vibepilot.services.deezer import RemoteServiceError, add_tracks_to_playlist, create_playlist
from vibepilot.services.vibe.params import SearchParameters

logger = logging.getLogger(__name__)

PLAYLIST_TITLE_PREFIX = "Pilot: "
MAX_TITLE_LENGTH = 100


class DeezerNotLinkedError(Exception):
    """The user has no usable Deezer access token."""


def default_playlist_title(prompt: str) -> str:
    title = f"{PLAYLIST_TITLE_PREFIX}{prompt.strip()}"
    return title[:MAX_TITLE_LENGTH]


def save_vibe_playlist(
    db: Session,
    user: User,
    title: str,
    prompt: str,
    tracks: list[DeezerTrack],
    params: SearchParameters,
) -> SavedPlaylist:
    """Create a Deezer playlist from vibe tracks and record it in history.

    Raises DeezerNotLinkedError without a valid token, RemoteServiceError when
    Deezer rejects a call. Nothing is recorded unless both calls succeed.
    """
    if not user.has_valid_deezer_token:
        raise DeezerNotLinkedError("Deezer account not linked")

    playlist = create_playlist(user.deezer_access_token, title)
    try:
        add_tracks_to_playlist(user.deezer_access_token, playlist.id, [t.id for t in tracks])
    except (RemoteServiceError, httpx.HTTPError):
        logger.error(
            "Adding tracks failed; empty Deezer playlist %s left on user %s", playlist.id, user.id
        )
        raise

    tags = [params.query] if params.query else []
    saved = SavedPlaylist(
        user_id=user.id,
        title=title,
        prompt=prompt,
        deezer_playlist_id=str(playlist.id),
        deezer_link=playlist.link,
        track_count=len(tracks),
        tracks_json=json.dumps([t.model_dump() for t in tracks]),
        tags_json=json.dumps(tags),
        vibe_params_json=json.dumps(params.to_dict()),
    )
    db.add(saved)
    db.commit()
    db.refresh(saved)

    logger.info("Saved vibe playlist %s for user %s", playlist.id, user.id)
    return saved


def list_saved_playlists(db: Session, user: User) -> list[SavedPlaylist]:
    """Playlist history for a user, newest first."""
    return (
        db.query(SavedPlaylist)
        .filter(SavedPlaylist.user_id == user.id)
        .order_by(SavedPlaylist.created_at.desc(), SavedPlaylist.id.desc())
        .all()
    )
