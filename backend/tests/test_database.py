from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from booktracker.core.database import persistence_errors
from booktracker.core.exceptions import PersistenceFailure


def test_database_errors_roll_back_and_become_persistence_failure():
    db = MagicMock()
    error = OperationalError("SELECT 1", {}, Exception("server closed the connection"))

    with pytest.raises(PersistenceFailure) as excinfo:
        with persistence_errors(db):
            raise error

    db.rollback.assert_called_once()
    assert excinfo.value.__cause__ is error


def test_integrity_errors_roll_back_and_pass_through():
    db = MagicMock()

    with pytest.raises(IntegrityError):
        with persistence_errors(db):
            raise IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))

    db.rollback.assert_called_once()


def test_other_errors_are_left_alone():
    db = MagicMock()

    with pytest.raises(KeyError):
        with persistence_errors(db):
            raise KeyError("user_id")

    db.rollback.assert_not_called()
