import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from booktracker.core.database import persistence_errors
from booktracker.core.exceptions import DuplicateEmail, InvalidCredentials
from booktracker.core.security import dummy_verify, get_password_hash, verify_password
from booktracker.models.user import User
from booktracker.schemas.user import CurrentUser

logger = logging.getLogger(__name__)


class AuthService:
    """Registration, credential checks and session-user resolution"""

    @staticmethod
    def register(db: Session, email: str, password: str) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises DuplicateEmail if the address is taken, including when a
        concurrent registration wins the race and trips the unique constraint.
        """
        try:
            with persistence_errors(db):
                # Explicit check gives a clean error before touching the constraint
                existing_user = db.query(User).filter(User.email == email).first()
                if existing_user:
                    raise DuplicateEmail()

                user = User(email=email, password_hash=get_password_hash(password))
                db.add(user)
                db.commit()
                db.refresh(user)
        except IntegrityError:
            raise DuplicateEmail()

        logger.info("Registered user %s", user.id)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User:
        """
        Return the user owning these credentials.

        Unknown email and wrong password both raise InvalidCredentials with
        the same message so callers cannot tell them apart.
        """
        with persistence_errors(db):
            user = db.query(User).filter(User.email == email).first()

        if user is None:
            dummy_verify()
            logger.info("Failed login attempt for %s", email)
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise InvalidCredentials()

        return user

    @staticmethod
    def resolve_session_user(db: Session, user_id) -> Optional[CurrentUser]:
        """Look up the user id stored in a session; None if it no longer resolves"""
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            return None

        with persistence_errors(db):
            user = db.query(User).filter(User.id == user_id).first()

        if user is None:
            return None
        return CurrentUser.model_validate(user)


auth_service = AuthService()
