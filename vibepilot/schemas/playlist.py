from datetime import datetime

from pydantic import BaseModel, Field

from vibepilot.schemas.deezer import DeezerTrack
from vibepilot.schemas.vibe import SearchParametersOut


class SavePlaylistRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=500)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    tracks: list[DeezerTrack] = Field(..., min_length=1, max_length=100)
    params: SearchParametersOut


class SavedPlaylistOut(BaseModel):
    id: int
    title: str
    prompt: str
    deezer_playlist_id: str
    deezer_link: str | None = None
    track_count: int
    tags: list[str] = []
    vibe_params: dict = {}
    tracks: list[DeezerTrack] = []
    created_at: datetime
