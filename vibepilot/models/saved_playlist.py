import json
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibepilot.core.time import utcnow
from vibepilot.models.base import Base


class SavedPlaylist(Base):
    """A vibe that was saved to Deezer as a playlist."""

    __tablename__ = "saved_playlists"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    prompt: Mapped[str] = mapped_column(String(500), default="")
    deezer_playlist_id: Mapped[str] = mapped_column(String(50))
    deezer_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    track_count: Mapped[int] = mapped_column(Integer, default=0)
    # JSON snapshots: track list, tag list, and the resolved search parameters
    tracks_json: Mapped[str] = mapped_column(Text, default="[]")
    tags_json: Mapped[str] = mapped_column(Text, default="[]")
    vibe_params_json: Mapped[str] = mapped_column(Text, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    user: Mapped["User"] = relationship("User", back_populates="playlists")

    def get_tracks(self) -> list[dict]:
        return json.loads(self.tracks_json) if self.tracks_json else []

    def get_tags(self) -> list[str]:
        return json.loads(self.tags_json) if self.tags_json else []

    def get_vibe_params(self) -> dict:
        return json.loads(self.vibe_params_json) if self.vibe_params_json else {}
