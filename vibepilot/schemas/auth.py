from pydantic import BaseModel


class TokenData(BaseModel):
    deezer_user_id: str | None = None


class DeezerAuthUrl(BaseModel):
    auth_url: str
    state: str
