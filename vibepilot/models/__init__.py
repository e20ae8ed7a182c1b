from vibepilot.models.base import Base
from vibepilot.models.saved_playlist import SavedPlaylist
from vibepilot.models.user import User

__all__ = [
    "Base",
    "User",
    "SavedPlaylist",
]
