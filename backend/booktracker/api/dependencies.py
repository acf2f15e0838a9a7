import logging
from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from booktracker.core.database import get_db
from booktracker.core.exceptions import LoginRequired
from booktracker.schemas.user import CurrentUser
from booktracker.services.auth_service import auth_service

logger = logging.getLogger(__name__)

# Session key holding the logged-in user's id
SESSION_USER_KEY = "user_id"


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[CurrentUser]:
    """
    Resolve the session's user id into a CurrentUser for this request.

    The result is also stored on request.state.user so templates and
    exception handlers see the same value. An id that no longer matches
    a row is dropped from the session and the request continues anonymous.
    """
    user = None
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is not None:
        user = auth_service.resolve_session_user(db, user_id)
        if user is None:
            logger.info("Dropping stale session for user id %s", user_id)
            request.session.pop(SESSION_USER_KEY, None)

    request.state.user = user
    return user


def require_user(
    current_user: Optional[CurrentUser] = Depends(get_current_user)
) -> CurrentUser:
    """
    Route guard for pages that need a logged-in user.

    Raises LoginRequired, which main.py turns into a redirect to /login.
    """
    if current_user is None:
        raise LoginRequired()
    return current_user


def login_session(request: Request, user_id: int) -> None:
    """Start a fresh session for the user"""
    request.session.clear()
    request.session[SESSION_USER_KEY] = user_id


def logout_session(request: Request) -> None:
    request.session.clear()
