from pydantic import BaseModel, ConfigDict, Field

from vibepilot.schemas.deezer import DeezerTrack


class VibeRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    prompt: str = Field(..., min_length=2, max_length=500)


class SearchParametersOut(BaseModel):
    query: str
    bpm_min: int | None = None
    bpm_max: int | None = None
    genre_id: int | None = None
    explanation: str = ""


class VibeMetricsOut(BaseModel):
    energy: float
    popularity: float
    tempo: float
    mood: float


class VibeResponse(BaseModel):
    explanation: str
    params: SearchParametersOut
    tracks: list[DeezerTrack] = []
    metrics: VibeMetricsOut
    fallback_query: str | None = None
