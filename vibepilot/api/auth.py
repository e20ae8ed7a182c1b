"""Deezer sign-in (OAuth2 authorization code flow) and session endpoints."""

import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from vibepilot.api.deps import get_current_user, get_db, require_deezer_oauth
from vibepilot.core.config import get_settings
from vibepilot.models.user import User
from vibepilot.schemas.auth import DeezerAuthUrl
from vibepilot.schemas.common import StatusMessageResponse
from vibepilot.schemas.user import UserOut
from vibepilot.services.auth import (
    create_access_token,
    create_oauth_state,
    forget_deezer_token,
    upsert_deezer_user,
    verify_oauth_state,
)
from vibepilot.services.deezer import (
    RemoteServiceError,
    exchange_code_for_token,
    fetch_current_user,
    get_auth_url,
)

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


def _frontend_redirect(path: str, **params: str) -> RedirectResponse:
    frontend_url = settings.public_url or "http://localhost:3000"
    url = f"{frontend_url}{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url)


@router.get(
    "/deezer/url",
    response_model=DeezerAuthUrl,
    dependencies=[Depends(require_deezer_oauth)],
)
def deezer_auth_url() -> DeezerAuthUrl:
    """Return the Deezer authorization URL to send the browser to."""
    state = create_oauth_state()
    return DeezerAuthUrl(auth_url=get_auth_url(state), state=state)


@router.get("/deezer/callback", dependencies=[Depends(require_deezer_oauth)])
def deezer_callback(
    code: str | None = Query(None),
    state: str = Query(...),
    error_reason: str | None = Query(None),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """Handle the redirect back from Deezer.

    Exchanges the code, stores the Deezer token on the user and hands a
    session token to the front end in the URL fragment.
    """
    if error_reason:
        return _frontend_redirect("/", auth_error=error_reason)
    if not verify_oauth_state(state):
        return _frontend_redirect("/", auth_error="invalid_state")
    if not code:
        return _frontend_redirect("/", auth_error="missing_code")

    try:
        token_data = exchange_code_for_token(code)
        profile = fetch_current_user(token_data["access_token"])
    except (RemoteServiceError, httpx.HTTPError) as e:
        logger.error("Deezer sign-in failed: %s", type(e).__name__)
        return _frontend_redirect("/", auth_error="token_exchange_failed")

    user = upsert_deezer_user(db, profile, token_data)
    logger.info("Deezer sign-in for user %s", user.id)

    session_token = create_access_token({"sub": user.deezer_user_id})
    frontend_url = settings.public_url or "http://localhost:3000"
    return RedirectResponse(url=f"{frontend_url}/auth/complete#token={session_token}")


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)) -> UserOut:
    return UserOut(
        id=current_user.id,
        deezer_user_id=current_user.deezer_user_id,
        name=current_user.name,
        email=current_user.email,
        picture_url=current_user.picture_url,
        created_at=current_user.created_at,
        deezer_linked=current_user.has_valid_deezer_token,
    )


@router.post("/logout", response_model=StatusMessageResponse)
def logout(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> StatusMessageResponse:
    """Forget the stored Deezer token; the front end drops its session token."""
    forget_deezer_token(db, current_user)
    return StatusMessageResponse(status="ok", message="Signed out")
