from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from booktracker.core.exceptions import DuplicateEmail, InvalidCredentials
from booktracker.core.security import verify_password
from booktracker.models.user import User
from booktracker.services.auth_service import auth_service


def test_register_hashes_password(db):
    user = auth_service.register(db, "reader@example.com", "s3cret")

    assert user.id is not None
    assert user.password_hash != "s3cret"
    assert user.password_hash.startswith("$2")
    assert verify_password("s3cret", user.password_hash)


def test_same_password_gets_different_salts(db):
    first = auth_service.register(db, "one@example.com", "shared")
    second = auth_service.register(db, "two@example.com", "shared")

    assert first.password_hash != second.password_hash


def test_register_twice_raises_duplicate_email(db):
    auth_service.register(db, "reader@example.com", "s3cret")

    with pytest.raises(DuplicateEmail):
        auth_service.register(db, "reader@example.com", "other")

    assert db.query(User).count() == 1


def test_email_is_case_sensitive(db):
    auth_service.register(db, "Reader@example.com", "s3cret")

    with pytest.raises(InvalidCredentials):
        auth_service.authenticate(db, "reader@example.com", "s3cret")


def test_authenticate_returns_user(db):
    user = auth_service.register(db, "reader@example.com", "s3cret")

    assert auth_service.authenticate(db, "reader@example.com", "s3cret").id == user.id


def test_wrong_password_and_unknown_email_look_the_same(db):
    auth_service.register(db, "reader@example.com", "s3cret")

    with pytest.raises(InvalidCredentials) as wrong_password:
        auth_service.authenticate(db, "reader@example.com", "nope")
    with pytest.raises(InvalidCredentials) as unknown_email:
        auth_service.authenticate(db, "nobody@example.com", "s3cret")

    assert wrong_password.value.message == unknown_email.value.message


def test_resolve_session_user(db):
    user = auth_service.register(db, "reader@example.com", "s3cret")

    current = auth_service.resolve_session_user(db, user.id)

    assert current.id == user.id
    assert current.email == "reader@example.com"


@pytest.mark.parametrize("stored_id", [999, "not-a-number", None])
def test_resolve_session_user_that_no_longer_exists(db, stored_id):
    assert auth_service.resolve_session_user(db, stored_id) is None


def test_register_race_on_unique_constraint_raises_duplicate_email():
    # The pre-check sees no user, then a concurrent insert wins at commit
    db = MagicMock()
    db.query.return_value.filter.return_value.first.return_value = None
    db.commit.side_effect = IntegrityError(
        "INSERT INTO users", {}, Exception("UNIQUE constraint failed: users.email")
    )

    with pytest.raises(DuplicateEmail):
        auth_service.register(db, "reader@example.com", "s3cret")

    db.rollback.assert_called_once()
