import secrets
from datetime import UTC, datetime, timedelta

import jwt
from sqlalchemy.orm import Session

from vibepilot.core.config import get_settings
from vibepilot.core.time import expiry_from_seconds, utcnow
from vibepilot.models.user import User
from vibepilot.schemas.auth import TokenData

settings = get_settings()

# Distinguishes OAuth state tokens from session tokens signed with the same secret
OAUTH_STATE_PURPOSE = "deezer_oauth_state"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expire_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    if payload.get("purpose") is not None:
        return None
    deezer_user_id = payload.get("sub")
    if deezer_user_id is None:
        return None
    return TokenData(deezer_user_id=str(deezer_user_id))


def create_oauth_state() -> str:
    """Signed, short-lived state value for the Deezer authorization redirect."""
    return create_access_token(
        {"purpose": OAUTH_STATE_PURPOSE, "nonce": secrets.token_urlsafe(16)},
        expires_delta=timedelta(minutes=settings.oauth_state_expire_minutes),
    )


def verify_oauth_state(state: str) -> bool:
    try:
        payload = jwt.decode(state, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return False
    return payload.get("purpose") == OAUTH_STATE_PURPOSE


def get_user_by_deezer_id(db: Session, deezer_user_id: str) -> User | None:
    return db.query(User).filter(User.deezer_user_id == deezer_user_id).first()


def upsert_deezer_user(db: Session, profile: dict, token_data: dict) -> User:
    """Create or update the user for a Deezer profile and store its token."""
    deezer_user_id = str(profile["id"])
    user = get_user_by_deezer_id(db, deezer_user_id)
    if user is None:
        user = User(deezer_user_id=deezer_user_id)
        db.add(user)

    user.name = profile.get("name") or ""
    user.email = profile.get("email")
    user.picture_url = profile.get("picture_medium") or profile.get("picture")
    user.deezer_access_token = token_data["access_token"]
    user.deezer_token_expires_at = expiry_from_seconds(token_data.get("expires"))
    user.last_login_at = utcnow()

    db.commit()
    db.refresh(user)
    return user


def forget_deezer_token(db: Session, user: User) -> None:
    user.deezer_access_token = None
    user.deezer_token_expires_at = None
    db.commit()
