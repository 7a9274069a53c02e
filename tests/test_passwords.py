"""Tests for password hashing and password accounts."""

import pytest

from resto_rate.exceptions import InvalidCredentialsError, InvalidInputError, UsernameTakenError
from resto_rate.models.user import User
from resto_rate.services.auth import (
    authenticate_user,
    create_user,
    get_password_hash,
    verify_password,
)


def test_hash_is_argon2id_and_verifies():
    hashed = get_password_hash("secret1")
    assert hashed.startswith("$argon2id$")
    assert "m=19456,t=2,p=1" in hashed
    assert verify_password("secret1", hashed)
    assert not verify_password("secret2", hashed)


def test_hash_is_salted():
    assert get_password_hash("secret1") != get_password_hash("secret1")


def test_verify_password_with_malformed_hash_returns_false():
    assert verify_password("secret1", "not-a-hash") is False
    assert verify_password("secret1", "") is False


def test_create_user_hashes_password(db):
    user = create_user(db, "alice", "secret1", age=30)
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)
    assert user.age == 30


@pytest.mark.parametrize(
    "username,password,message",
    [
        ("ab", "secret1", "Username must be between 3 and 31 characters"),
        ("a" * 32, "secret1", "Username must be between 3 and 31 characters"),
        ("alice", "12345", "Password must be between 6 and 255 characters"),
    ],
)
def test_create_user_validates_lengths(db, username, password, message):
    with pytest.raises(InvalidInputError) as exc_info:
        create_user(db, username, password)
    assert exc_info.value.message == message
    assert db.query(User).count() == 0


def test_create_user_duplicate_username(db):
    create_user(db, "alice", "secret1")
    with pytest.raises(UsernameTakenError) as exc_info:
        create_user(db, "alice", "another1")
    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "Username already exists"


def test_authenticate_user(db):
    created = create_user(db, "alice", "secret1")
    assert authenticate_user(db, "alice", "secret1").id == created.id


@pytest.mark.parametrize("username,password", [("alice", "wrong12"), ("nobody", "secret1")])
def test_authenticate_user_failures_share_one_message(db, username, password):
    create_user(db, "alice", "secret1")
    with pytest.raises(InvalidCredentialsError) as exc_info:
        authenticate_user(db, username, password)
    assert exc_info.value.message == "Invalid username or password"


def test_authenticate_google_only_user_fails(db):
    db.add(User(google_id="g-1", email="carol@example.com", name="Carol"))
    db.commit()
    with pytest.raises(InvalidCredentialsError):
        authenticate_user(db, "carol@example.com", "secret1")
