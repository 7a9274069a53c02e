"""Google OAuth code exchange and account linking."""

import logging
from datetime import datetime
from urllib.parse import urlencode

import httpx
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resto_rate.config import Settings, get_settings
from resto_rate.exceptions import ConflictError, UpstreamAuthError
from resto_rate.models.user import User
from resto_rate.schemas.google import GoogleTokens, GoogleUserInfo
from resto_rate.services.sessions import SessionManager

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Server-to-server calls to Google's OAuth 2.0 endpoints."""

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"  # noqa: S105
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    SCOPES = "email profile"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.client_id = self.settings.google_client_id
        self.client_secret = self.settings.google_client_secret
        self.redirect_uri = self.settings.google_redirect_uri
        self.timeout = 15.0

    @property
    def is_configured(self) -> bool:
        """Check if Google OAuth credentials are configured."""
        return self.settings.google_oauth_configured

    def _require_configured(self) -> None:
        if not self.is_configured:
            raise UpstreamAuthError("Google OAuth is not configured")

    def generate_authorization_url(self) -> str:
        """Build the consent screen URL. No network access."""
        self._require_configured()
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.SCOPES,
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code_for_tokens(self, code: str) -> GoogleTokens:
        """Exchange an authorization code for access and ID tokens."""
        self._require_configured()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.TOKEN_URL,
                    data={
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "grant_type": "authorization_code",
                        "redirect_uri": self.redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Google token endpoint: {e}")
            raise UpstreamAuthError("Failed to reach Google token endpoint") from e

        self._raise_for_status(response, "Failed to exchange code for tokens")
        return GoogleTokens.model_validate(response.json())

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the profile for an access token."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling Google userinfo endpoint: {e}")
            raise UpstreamAuthError("Failed to reach Google userinfo endpoint") from e

        self._raise_for_status(response, "Failed to get user info")
        return GoogleUserInfo.model_validate(response.json())

    @staticmethod
    def _raise_for_status(response: httpx.Response, message: str) -> None:
        if response.is_success:
            return
        logger.warning(f"{message}: {response.status_code} {response.text}")
        raise UpstreamAuthError(
            f"{message}: {response.status_code}",
            upstream_status=response.status_code,
            upstream_body=response.text,
        )


def upsert_google_user(db: Session, info: GoogleUserInfo) -> User:
    """Find or create the local user for a Google profile.

    Lookup order: Google id (refresh email and name), then email (link the
    Google id to the existing account), otherwise a new Google-only user.
    An email already held by another account is never moved onto this one.
    """
    user = db.query(User).filter(User.google_id == info.id).first()
    if user:
        if info.email and info.email != user.email:
            taken = (
                db.query(User).filter(User.email == info.email, User.id != user.id).first()
            )
            if taken:
                logger.warning(
                    f"Google email for user {user.id} belongs to user {taken.id}, keeping old email"
                )
            else:
                user.email = info.email
        user.name = info.name
        return _commit_google_user(db, user)

    if info.email:
        user = db.query(User).filter(User.email == info.email).first()
        if user:
            logger.info(f"Linking Google account to existing user {user.id}")
            user.google_id = info.id
            user.name = info.name
            return _commit_google_user(db, user)

    user = User(google_id=info.id, email=info.email, name=info.name, is_admin=False)
    db.add(user)
    user = _commit_google_user(db, user)
    logger.info(f"Created user {user.id} from Google account")
    return user


def _commit_google_user(db: Session, user: User) -> User:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Google account upsert conflicted: {e.orig}")
        raise ConflictError("Google account conflicts with an existing user") from e
    db.refresh(user)
    return user


async def authenticate_with_google(
    db: Session,
    oauth: GoogleOAuthClient,
    sessions: SessionManager,
    code: str,
) -> tuple[User, str, datetime]:
    """Full OAuth round trip. Returns ``(user, token, expires_at)``."""
    tokens = await oauth.exchange_code_for_tokens(code)
    info = await oauth.get_user_info(tokens.access_token)
    user = upsert_google_user(db, info)
    token, expires_at = sessions.create_session(user.id)
    return user, token, expires_at
