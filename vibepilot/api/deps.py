from collections.abc import Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from vibepilot.core.config import get_settings
from vibepilot.db.session import SessionLocal
from vibepilot.models.user import User
from vibepilot.services.auth import decode_token, get_user_by_deezer_id

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User | None:
    """Resolve the session user if a valid bearer token was sent."""
    if credentials is None:
        return None
    token_data = decode_token(credentials.credentials)
    if token_data is None or token_data.deezer_user_id is None:
        return None
    return get_user_by_deezer_id(db, token_data.deezer_user_id)


def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_deezer_oauth() -> None:
    """Reject sign-in and playlist endpoints when running read-only."""
    if not get_settings().is_deezer_oauth_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Deezer sign-in is not configured; playlist saving is disabled",
        )
