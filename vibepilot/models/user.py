from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vibepilot.core.encryption import EncryptedText
from vibepilot.core.time import utcnow
from vibepilot.models.base import Base


class User(Base):
    """A listener who signed in with Deezer."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    deezer_user_id: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Deezer OAuth token (encrypted at rest via Fernet); no expiry = offline_access token
    deezer_access_token: Mapped[str | None] = mapped_column(EncryptedText, nullable=True)
    deezer_token_expires_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    playlists: Mapped[list["SavedPlaylist"]] = relationship(
        "SavedPlaylist", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def has_valid_deezer_token(self) -> bool:
        if not self.deezer_access_token:
            return False
        if self.deezer_token_expires_at is None:
            return True
        return self.deezer_token_expires_at > utcnow()
