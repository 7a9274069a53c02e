"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from resto_rate.api.dependencies import (
    CurrentAuth,
    get_google_oauth,
    get_session_manager,
)
from resto_rate.api.wire import MsgPackResponse, MsgPackRoute
from resto_rate.database import get_db
from resto_rate.exceptions import NotFoundError, SessionNotFoundOrExpiredError
from resto_rate.schemas.auth import (
    AuthResponse,
    GoogleAuthUrlResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from resto_rate.schemas.base import MessageResponse
from resto_rate.services import auth as auth_service
from resto_rate.services.google_auth import GoogleOAuthClient, authenticate_with_google
from resto_rate.services.sessions import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
    route_class=MsgPackRoute,
    default_response_class=MsgPackResponse,
)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Login with username and password."""
    user, token, expires_at = auth_service.login(
        db, sessions, credentials.username, credentials.password
    )
    return AuthResponse(
        user=UserResponse.model_validate(user), session_id=token, expires_at=expires_at
    )


@router.post("/register", response_model=AuthResponse)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Register a new password account and sign it in."""
    user, token, expires_at = auth_service.register(
        db, sessions, user_data.username, user_data.password, user_data.age
    )
    return AuthResponse(
        user=UserResponse.model_validate(user), session_id=token, expires_at=expires_at
    )


@router.get("/google/url", response_model=GoogleAuthUrlResponse)
async def google_auth_url(
    oauth: Annotated[GoogleOAuthClient, Depends(get_google_oauth)],
):
    """Get the Google consent screen URL."""
    return GoogleAuthUrlResponse(url=oauth.generate_authorization_url())


@router.get("/google/callback", response_model=AuthResponse)
async def google_callback(
    code: Annotated[str, Query(min_length=1)],
    db: Annotated[Session, Depends(get_db)],
    oauth: Annotated[GoogleOAuthClient, Depends(get_google_oauth)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Complete Google sign-in with the authorization code."""
    user, token, expires_at = await authenticate_with_google(db, oauth, sessions, code)
    return AuthResponse(
        user=UserResponse.model_validate(user), session_id=token, expires_at=expires_at
    )


@router.get("/verify", response_model=AuthResponse)
async def verify(auth: CurrentAuth):
    """Confirm the caller's session and return its user."""
    return AuthResponse(user=UserResponse.model_validate(auth.user), session_id=auth.token)


@router.get("/session/{token}", response_model=AuthResponse)
async def get_session(
    token: str,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Look up the session for a token."""
    try:
        principal = sessions.verify_session(token)
    except SessionNotFoundOrExpiredError as e:
        raise NotFoundError("Session not found or expired") from e
    return AuthResponse(
        user=UserResponse.model_validate(principal.user),
        session_id=token,
        expires_at=principal.expires_at,
    )


@router.delete("/logout", response_model=MessageResponse)
async def logout(
    auth: CurrentAuth,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Invalidate the caller's session."""
    sessions.invalidate_session(auth.session_id)
    logger.info(f"User {auth.user.id} logged out")
    return MessageResponse(message="Logged out successfully")
