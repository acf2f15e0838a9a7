from typing import Optional
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from booktracker.api.dependencies import get_current_user, login_session, logout_session, require_user
from booktracker.api.templating import flash, form_errors, render
from booktracker.core.database import get_db
from booktracker.core.exceptions import DuplicateEmail, InvalidCredentials
from booktracker.schemas.user import CurrentUser, UserCreate
from booktracker.services.auth_service import auth_service

router = APIRouter(tags=["auth"])


def _redirect(url: str) -> RedirectResponse:
    # 303 so the browser follows a form POST with a GET
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login", response_class=HTMLResponse)
def login_page(
    request: Request,
    current_user: Optional[CurrentUser] = Depends(get_current_user)
):
    """Render the login form"""
    if current_user is not None:
        return _redirect("/")
    return render(request, "login.html")


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db)
):
    """Check credentials and start a session"""
    try:
        user = auth_service.authenticate(db, email.strip(), password)
    except InvalidCredentials as exc:
        # One generic message for unknown email and wrong password
        flash(request, exc.message)
        return _redirect("/login")

    login_session(request, user.id)
    return _redirect("/")


@router.get("/register", response_class=HTMLResponse)
def register_page(
    request: Request,
    current_user: Optional[CurrentUser] = Depends(get_current_user)
):
    """Render the registration form"""
    if current_user is not None:
        return _redirect("/")
    return render(request, "register.html")


@router.post("/register")
def register(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db)
):
    """Create an account and log the new user in"""
    email = email.strip()
    try:
        # EmailStr only validates; the address is stored exactly as typed
        user_data = UserCreate(email=email, password=password)
    except ValidationError as exc:
        for message in form_errors(exc):
            flash(request, message)
        return _redirect("/register")

    try:
        user = auth_service.register(db, email, user_data.password)
    except DuplicateEmail as exc:
        flash(request, exc.message)
        return _redirect("/register")

    login_session(request, user.id)
    return _redirect("/")


@router.post("/logout")
def logout(
    request: Request,
    current_user: CurrentUser = Depends(require_user)
):
    """Clear the session"""
    logout_session(request)
    return _redirect("/login")
