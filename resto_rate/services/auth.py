"""Authentication service for password handling, login and registration."""

import logging
from datetime import datetime

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resto_rate.exceptions import InvalidCredentialsError, InvalidInputError, UsernameTakenError
from resto_rate.models.user import User
from resto_rate.schemas.auth import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
)
from resto_rate.services.sessions import SessionManager

logger = logging.getLogger(__name__)

# Password hashing context. The Argon2id parameters are fixed so that every
# stored hash stays verifiable.
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=19456,
    argon2__time_cost=2,
    argon2__digest_size=32,
    argon2__parallelism=1,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognized or corrupt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def validate_credentials(username: str, password: str) -> None:
    """Check username and password lengths for a new password account."""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
        )
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise InvalidInputError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get a user by username."""
    return db.query(User).filter(User.username == username).first()


def authenticate_user(db: Session, username: str, password: str) -> User:
    """Authenticate a user by username and password.

    Missing users, Google-only accounts and wrong passwords all raise the
    same InvalidCredentialsError.
    """
    user = get_user_by_username(db, username)
    if not user or not user.password_hash:
        logger.info(f"Failed login for username '{username}'")
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        logger.info(f"Failed login for username '{username}'")
        raise InvalidCredentialsError()
    return user


def create_user(db: Session, username: str, password: str, age: int | None = None) -> User:
    """Create a password account. The password is always hashed."""
    validate_credentials(username, password)

    user = User(username=username, password_hash=get_password_hash(password), age=age)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsernameTakenError() from e
    db.refresh(user)
    logger.info(f"Created user {user.id} ({username})")
    return user


def login(
    db: Session, sessions: SessionManager, username: str, password: str
) -> tuple[User, str, datetime]:
    """Authenticate and open a session. Returns ``(user, token, expires_at)``."""
    user = authenticate_user(db, username, password)
    token, expires_at = sessions.create_session(user.id)
    return user, token, expires_at


def register(
    db: Session,
    sessions: SessionManager,
    username: str,
    password: str,
    age: int | None = None,
) -> tuple[User, str, datetime]:
    """Create a password account and open a session for it."""
    user = create_user(db, username, password, age)
    token, expires_at = sessions.create_session(user.id)
    return user, token, expires_at
