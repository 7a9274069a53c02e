"""FastAPI dependencies for authentication and services."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from resto_rate.config import Settings, get_settings
from resto_rate.database import get_db
from resto_rate.exceptions import SessionNotFoundOrExpiredError, UnauthenticatedError
from resto_rate.models.user import User
from resto_rate.services.category_service import CategoryService
from resto_rate.services.google_auth import GoogleOAuthClient
from resto_rate.services.restaurant_service import RestaurantService
from resto_rate.services.review_service import ReviewService
from resto_rate.services.sessions import SessionManager
from resto_rate.services.user_service import UserService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)
session_header_scheme = APIKeyHeader(name="X-Session-Id", auto_error=False)


@dataclass
class AuthContext:
    """The authenticated caller of a request."""

    user: User
    session_id: str
    token: str


def get_session_manager(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionManager:
    """Get session manager bound to the request's database session."""
    return SessionManager(db, lifetime_days=settings.session_lifetime_days)


def get_google_oauth(
    settings: Annotated[Settings, Depends(get_settings)],
) -> GoogleOAuthClient:
    return GoogleOAuthClient(settings)


def get_session_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session_header: Annotated[str | None, Depends(session_header_scheme)],
) -> str | None:
    """Extract the session token from the request.

    ``Authorization: Bearer <token>`` wins over ``X-Session-Id``. Other
    authorization schemes are ignored.
    """
    if credentials and credentials.credentials:
        return credentials.credentials
    if session_header and session_header.strip():
        return session_header.strip()
    return None


def require_auth(
    token: Annotated[str | None, Depends(get_session_token)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> AuthContext:
    """Get the authenticated caller or reject the request with 401."""
    if not token:
        raise UnauthenticatedError("Authentication required")

    try:
        principal = sessions.verify_session(token)
    except SessionNotFoundOrExpiredError as e:
        raise UnauthenticatedError("Invalid or expired session") from e

    return AuthContext(user=principal.user, session_id=principal.session_id, token=token)


def optional_auth(
    token: Annotated[str | None, Depends(get_session_token)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
) -> AuthContext | None:
    """Get the authenticated caller, or None for anonymous requests."""
    if not token:
        return None

    try:
        principal = sessions.verify_session(token)
    except SessionNotFoundOrExpiredError:
        logger.debug("Ignoring invalid session token on optional-auth route")
        return None
    except SQLAlchemyError:
        logger.exception("Session lookup failed on optional-auth route")
        sessions.db.rollback()
        return None

    return AuthContext(user=principal.user, session_id=principal.session_id, token=token)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
) -> UserService:
    """Get user service with dependencies."""
    return UserService(db)


def get_restaurant_service(
    db: Annotated[Session, Depends(get_db)],
) -> RestaurantService:
    """Get restaurant service with dependencies."""
    return RestaurantService(db)


def get_review_service(
    db: Annotated[Session, Depends(get_db)],
) -> ReviewService:
    """Get review service with dependencies."""
    return ReviewService(db)


def get_category_service(
    db: Annotated[Session, Depends(get_db)],
) -> CategoryService:
    """Get category service with dependencies."""
    return CategoryService(db)


CurrentAuth = Annotated[AuthContext, Depends(require_auth)]
OptionalAuth = Annotated[AuthContext | None, Depends(optional_auth)]
