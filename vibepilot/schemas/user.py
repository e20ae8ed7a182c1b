from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    deezer_user_id: str
    name: str
    email: str | None = None
    picture_url: str | None = None
    created_at: datetime
    deezer_linked: bool = False


class PublicSettings(BaseModel):
    llm_available: bool
    playlist_saving_enabled: bool
