from typing import Optional
from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from booktracker.api.dependencies import require_user
from booktracker.api.templating import form_errors, render
from booktracker.core.database import get_db
from booktracker.schemas.book import BookFields
from booktracker.schemas.user import CurrentUser
from booktracker.services.book_service import book_service
from booktracker.services.cover_service import cover_service

router = APIRouter(tags=["books"])


def book_form_data(
    title: str = Form(""),
    author: str = Form(""),
    isbn: str = Form(""),
    rating: str = Form(""),
    finished_on: str = Form(""),
    notes: str = Form("")
) -> dict:
    """Raw add/edit form values, kept as strings so they can be echoed back on errors"""
    return {
        "title": title,
        "author": author,
        "isbn": isbn,
        "rating": rating,
        "finished_on": finished_on,
        "notes": notes,
    }


def _render_form(request: Request, book, action: str, heading: str,
                 errors=None, status_code: int = 200):
    return render(
        request,
        "book_form.html",
        {"book": book, "action": action, "heading": heading, "errors": errors or []},
        status_code=status_code,
    )


def _redirect_home() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/", response_class=HTMLResponse)
def list_books(
    request: Request,
    sort: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db)
):
    """List the user's books, ?sort=recent|rating|title"""
    sort_key = book_service.normalize_sort(sort)
    books = book_service.list_books(db, current_user.id, sort_key)
    return render(request, "index.html", {"books": books, "sort": sort_key})


@router.get("/books/new", response_class=HTMLResponse)
def new_book(
    request: Request,
    current_user: CurrentUser = Depends(require_user)
):
    return _render_form(request, {}, "/books", "Add a book")


@router.post("/books")
def create_book(
    request: Request,
    form: dict = Depends(book_form_data),
    current_user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Create a book from the add form"""
    try:
        fields = BookFields(**form)
    except ValidationError as exc:
        return _render_form(
            request, form, "/books", "Add a book",
            errors=form_errors(exc), status_code=422,
        )

    cover_url = cover_service.fetch_cover_url(fields.isbn)
    book_service.create_book(db, current_user.id, fields, cover_url=cover_url)
    return _redirect_home()


@router.get("/books/{book_id}/edit", response_class=HTMLResponse)
def edit_book(
    request: Request,
    book_id: int,
    current_user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Render the edit form; NotFound (404) if the book is not the user's"""
    book = book_service.get_book_for_edit(db, current_user.id, book_id)
    return _render_form(request, book, f"/books/{book_id}/edit", "Edit book")


@router.post("/books/{book_id}/edit")
def update_book(
    request: Request,
    book_id: int,
    form: dict = Depends(book_form_data),
    current_user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db)
):
    """Overwrite a book from the edit form; a book the user does not own is left alone"""
    try:
        fields = BookFields(**form)
    except ValidationError as exc:
        return _render_form(
            request, form, f"/books/{book_id}/edit", "Edit book",
            errors=form_errors(exc), status_code=422,
        )

    cover_url = cover_service.fetch_cover_url(fields.isbn)
    book_service.update_book(db, current_user.id, book_id, fields, cover_url=cover_url)
    return _redirect_home()


@router.post("/books/{book_id}/delete")
def delete_book(
    book_id: int,
    current_user: CurrentUser = Depends(require_user),
    db: Session = Depends(get_db)
):
    book_service.delete_book(db, current_user.id, book_id)
    return _redirect_home()
