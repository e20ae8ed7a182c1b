"""Pydantic models for Deezer catalog records.

Deezer returns many more fields than these; unknown fields are ignored.
"""

from pydantic import BaseModel, Field


class DeezerArtist(BaseModel):
    id: int | None = None
    name: str = "Unknown Artist"
    link: str | None = None
    picture: str | None = None
    picture_small: str | None = None
    picture_medium: str | None = None
    picture_big: str | None = None
    picture_xl: str | None = None


class DeezerAlbum(BaseModel):
    id: int | None = None
    title: str | None = None
    cover: str | None = None
    cover_small: str | None = None
    cover_medium: str | None = None
    cover_big: str | None = None
    cover_xl: str | None = None


class DeezerTrack(BaseModel):
    """Track record from the Deezer search endpoint."""

    id: int
    title: str
    title_short: str | None = None
    link: str | None = None
    duration: int = 0  # seconds
    rank: int = 0  # Deezer popularity rank, roughly 0-1,000,000
    explicit_lyrics: bool = False
    preview: str | None = None  # 30s MP3 preview URL
    artist: DeezerArtist = Field(default_factory=DeezerArtist)
    album: DeezerAlbum = Field(default_factory=DeezerAlbum)


class DeezerPlaylist(BaseModel):
    """Playlist created on the user's Deezer account."""

    id: int
    link: str
