"""Deezer API integration for catalog search, OAuth sign-in and playlist creation.

Search is public and needs no credentials. Sign-in uses Deezer's OAuth2
authorization code flow (connect.deezer.com); the resulting access token is
what playlist creation runs under.

Deezer reports some failures as HTTP 200 with an ``{"error": {...}}`` body,
so playlist and OAuth calls check for that as well as the status code.
"""

import logging
from dataclasses import dataclass, field
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from vibepilot.core.config import get_settings
from vibepilot.schemas.deezer import DeezerPlaylist, DeezerTrack
from vibepilot.services.vibe.params import SearchParameters

logger = logging.getLogger(__name__)

DEEZER_PLAYLIST_URL = "https://www.deezer.com/playlist/{playlist_id}"

# Number of leading query tokens kept by the zero-result fallback search
FALLBACK_QUERY_TOKENS = 3

# Truncation for upstream bodies carried on RemoteServiceError
MAX_ERROR_BODY_LENGTH = 500


class RemoteServiceError(Exception):
    """A Deezer endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str = "", service: str = "deezer"):
        self.status_code = status_code
        self.body = body[:MAX_ERROR_BODY_LENGTH]
        self.service = service
        super().__init__(f"{service} returned HTTP {status_code}: {self.body}")


@dataclass
class SearchOutcome:
    """Tracks from a search plus the simplified query if the fallback was used."""

    tracks: list[DeezerTrack] = field(default_factory=list)
    query: str = ""
    fallback_query: str | None = None


def _api_base() -> str:
    return get_settings().deezer_api_base.rstrip("/")


def _timeout() -> float:
    return get_settings().deezer_timeout_seconds


def _raise_for_status(response: httpx.Response) -> None:
    if not response.is_success:
        raise RemoteServiceError(response.status_code, response.text)


def _raise_for_error_body(response: httpx.Response, data) -> None:
    """Turn Deezer's in-body error objects into RemoteServiceError."""
    if isinstance(data, dict) and "error" in data:
        raise RemoteServiceError(response.status_code, response.text)


def _checked_json(response: httpx.Response):
    """Decode a Deezer response body; bad status, non-JSON or error bodies raise."""
    _raise_for_status(response)
    try:
        data = response.json()
    except ValueError:
        raise RemoteServiceError(response.status_code, response.text)
    _raise_for_error_body(response, data)
    return data


# --- Search ---------------------------------------------------------------


def compose_search_query(params: SearchParameters) -> str:
    """Build the ``q`` value: trimmed query text plus optional BPM filter tokens."""
    parts = []
    query = params.query.strip()
    if query:
        parts.append(query)
    if params.bpm_min is not None:
        parts.append(f"bpm_min:{params.bpm_min}")
    if params.bpm_max is not None:
        parts.append(f"bpm_max:{params.bpm_max}")
    return " ".join(parts)


def simplify_query(query: str) -> str:
    """Keep the first few whitespace-separated tokens of a query."""
    return " ".join(query.split()[:FALLBACK_QUERY_TOKENS])


def _parse_tracks(data) -> list[DeezerTrack]:
    """Parse the ``data`` array of a search response.

    A body without a ``data`` list is treated as an empty result.
    """
    if not isinstance(data, dict) or not isinstance(data.get("data"), list):
        logger.warning("Deezer search response has no track list, treating as empty")
        return []

    tracks = []
    for record in data["data"]:
        try:
            tracks.append(DeezerTrack.model_validate(record))
        except ValidationError:
            logger.warning("Skipping malformed Deezer track record")
    return tracks


async def search_tracks(query: str, limit: int) -> list[DeezerTrack]:
    """Run one Deezer catalog search.

    Raises RemoteServiceError on a non-success HTTP status.
    """
    async with httpx.AsyncClient(timeout=_timeout()) as client:
        response = await client.get(
            f"{_api_base()}/search",
            params={"q": query, "limit": limit},
        )

    _raise_for_status(response)

    try:
        data = response.json()
    except ValueError:
        logger.warning("Deezer search returned a non-JSON body, treating as empty")
        return []

    tracks = _parse_tracks(data)
    logger.info("Deezer search %r returned %d tracks", query, len(tracks))
    return tracks


async def search_with_fallback(params: SearchParameters, limit: int) -> SearchOutcome:
    """Search Deezer for the resolved parameters.

    If the composed search finds nothing, retries once with only the first
    three words of the query and no BPM filters. At most two requests.
    """
    query = params.query.strip()
    if not query:
        logger.warning("Resolved vibe query is empty, skipping Deezer search")
        return SearchOutcome()

    composed = compose_search_query(params)
    tracks = await search_tracks(composed, limit)
    if tracks:
        return SearchOutcome(tracks=tracks, query=composed)

    simplified = simplify_query(query)
    logger.info("No results for %r, retrying with simplified query %r", composed, simplified)
    tracks = await search_tracks(simplified, limit)
    if tracks:
        return SearchOutcome(tracks=tracks, query=simplified, fallback_query=simplified)
    return SearchOutcome(query=simplified)


# --- OAuth ----------------------------------------------------------------


def _connect_base() -> str:
    return get_settings().deezer_connect_base.rstrip("/")


def get_auth_url(state: str) -> str:
    """Build the Deezer authorization URL the browser is sent to."""
    settings = get_settings()
    query = urlencode(
        {
            "app_id": settings.deezer_client_id,
            "redirect_uri": settings.deezer_redirect_uri,
            "perms": settings.deezer_perms,
            "response_type": "code",
            "state": state,
        }
    )
    return f"{_connect_base()}/oauth/auth.php?{query}"


def exchange_code_for_token(code: str) -> dict:
    """Exchange an authorization code for an access token.

    Returns ``{"access_token": ..., "expires": seconds}``; ``expires`` is 0
    for offline_access tokens. Raises RemoteServiceError on failure.
    """
    settings = get_settings()
    with httpx.Client(timeout=_timeout()) as client:
        response = client.get(
            f"{_connect_base()}/oauth/access_token.php",
            params={
                "app_id": settings.deezer_client_id,
                "secret": settings.deezer_client_secret,
                "code": code,
                "output": "json",
            },
        )

    _raise_for_status(response)
    try:
        data = response.json()
    except ValueError:
        # Deezer answers "wrong code" as a plain-text 200
        raise RemoteServiceError(response.status_code, response.text)

    _raise_for_error_body(response, data)
    if not isinstance(data, dict) or not data.get("access_token"):
        raise RemoteServiceError(response.status_code, response.text)

    return {
        "access_token": data["access_token"],
        "expires": int(data.get("expires") or 0),
    }


def fetch_current_user(access_token: str) -> dict:
    """Fetch the profile of the user owning ``access_token``."""
    with httpx.Client(timeout=_timeout()) as client:
        response = client.get(
            f"{_api_base()}/user/me",
            params={"access_token": access_token},
        )

    data = _checked_json(response)
    if not isinstance(data, dict) or "id" not in data:
        raise RemoteServiceError(response.status_code, response.text)
    return data


# --- Playlists ------------------------------------------------------------


def create_playlist(access_token: str, title: str) -> DeezerPlaylist:
    """Create an empty playlist on the user's account."""
    with httpx.Client(timeout=_timeout()) as client:
        response = client.post(
            f"{_api_base()}/user/me/playlists",
            params={"access_token": access_token, "title": title},
        )

    data = _checked_json(response)
    if not isinstance(data, dict) or not data.get("id"):
        raise RemoteServiceError(response.status_code, response.text)

    playlist_id = int(data["id"])
    link = data.get("link") or DEEZER_PLAYLIST_URL.format(playlist_id=playlist_id)
    logger.info("Created Deezer playlist %s", playlist_id)
    return DeezerPlaylist(id=playlist_id, link=link)


def add_tracks_to_playlist(access_token: str, playlist_id: int, track_ids: list[int]) -> None:
    """Append tracks to a playlist in a single request."""
    if not track_ids:
        return

    with httpx.Client(timeout=_timeout()) as client:
        response = client.post(
            f"{_api_base()}/playlist/{playlist_id}/tracks",
            params={
                "access_token": access_token,
                "songs": ",".join(str(tid) for tid in track_ids),
            },
        )

    _checked_json(response)
    logger.info("Added %d tracks to Deezer playlist %s", len(track_ids), playlist_id)
