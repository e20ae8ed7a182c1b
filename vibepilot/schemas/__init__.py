from vibepilot.schemas.auth import DeezerAuthUrl, TokenData
from vibepilot.schemas.deezer import DeezerPlaylist, DeezerTrack
from vibepilot.schemas.playlist import SavedPlaylistOut, SavePlaylistRequest
from vibepilot.schemas.user import PublicSettings, UserOut
from vibepilot.schemas.vibe import VibeRequest, VibeResponse

__all__ = [
    "TokenData",
    "DeezerAuthUrl",
    "DeezerTrack",
    "DeezerPlaylist",
    "UserOut",
    "PublicSettings",
    "VibeRequest",
    "VibeResponse",
    "SavePlaylistRequest",
    "SavedPlaylistOut",
]
