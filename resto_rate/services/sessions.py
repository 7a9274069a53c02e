"""Session issuing, verification and invalidation."""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from resto_rate.exceptions import SessionNotFoundOrExpiredError
from resto_rate.models.session import UserSession
from resto_rate.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_LIFETIME_DAYS = 30


def hash_token(token: str) -> str:
    """Return the session id stored for a client token (lowercase hex SHA-256)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_token() -> str:
    """Generate an opaque 256-bit session token."""
    return secrets.token_urlsafe(32)


@dataclass
class Principal:
    """Authenticated user resolved from a session."""

    user: User
    session_id: str
    expires_at: datetime


class SessionManager:
    """Issues and validates server-side sessions.

    The raw token only ever exists in the return value of ``create_session``
    and in client requests. The database stores ``hash_token(token)``, so a
    leaked ``sessions`` table cannot be replayed as bearer tokens.
    """

    def __init__(self, db: Session, lifetime_days: int = DEFAULT_SESSION_LIFETIME_DAYS):
        self.db = db
        self.lifetime = timedelta(days=lifetime_days)

    def create_session(self, user_id: str) -> tuple[str, datetime]:
        """Create a session for a user and return ``(token, expires_at)``."""
        token = generate_token()
        expires_at = datetime.now(UTC) + self.lifetime

        self.db.add(UserSession(id=hash_token(token), user_id=user_id, expires_at=expires_at))
        self.db.commit()

        logger.info(f"Created session for user {user_id}, expires {expires_at.isoformat()}")
        return token, expires_at

    def verify_session(self, token: str) -> Principal:
        """Resolve a client token to its user.

        Raises SessionNotFoundOrExpiredError for unknown and expired sessions
        alike.
        """
        session_id = hash_token(token)
        row = (
            self.db.query(UserSession, User)
            .join(User, UserSession.user_id == User.id)
            .filter(
                UserSession.id == session_id,
                UserSession.expires_at > datetime.now(UTC),
            )
            .first()
        )
        if row is None:
            raise SessionNotFoundOrExpiredError()

        user_session, user = row
        return Principal(user=user, session_id=session_id, expires_at=user_session.expires_at)

    def invalidate_session(self, session_id: str) -> None:
        """Delete a session by id. Deleting a missing session is not an error."""
        deleted = self.db.query(UserSession).filter(UserSession.id == session_id).delete()
        self.db.commit()
        if deleted:
            logger.info("Invalidated session")

    def invalidate_user_sessions(self, user_id: str, commit: bool = True) -> int:
        """Delete every session belonging to a user. Returns the number removed.

        With ``commit=False`` the deletion is only staged in the caller's transaction.
        """
        deleted = self.db.query(UserSession).filter(UserSession.user_id == user_id).delete()
        if not commit:
            return deleted
        self.db.commit()
        logger.info(f"Invalidated {deleted} session(s) for user {user_id}")
        return deleted
