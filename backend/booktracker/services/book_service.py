import logging
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, Query
from booktracker.core.database import persistence_errors
from booktracker.core.exceptions import NotFound
from booktracker.models.book import Book
from booktracker.schemas.book import BookFields

logger = logging.getLogger(__name__)

DEFAULT_SORT = "recent"

# ORDER BY clauses per sort key; NULL ratings/dates always go last
SORT_ORDERS = {
    "recent": (Book.finished_on.desc().nulls_last(), Book.id.desc()),
    "rating": (Book.rating.desc().nulls_last(), Book.finished_on.desc().nulls_last()),
    "title": (func.lower(Book.title).asc(),),
}


class BookService:
    """
    CRUD for a user's books.

    Every query goes through _owned_by(), which filters on both the
    book id and the owning user id.
    """

    @staticmethod
    def normalize_sort(sort_key: Optional[str]) -> str:
        """Unknown or missing sort keys fall back to 'recent'"""
        return sort_key if sort_key in SORT_ORDERS else DEFAULT_SORT

    @staticmethod
    def _owned_by(db: Session, user_id: int, book_id: int) -> Query:
        return db.query(Book).filter(Book.id == book_id, Book.user_id == user_id)

    @staticmethod
    def list_books(db: Session, user_id: int, sort_key: Optional[str] = DEFAULT_SORT) -> List[Book]:
        order_by = SORT_ORDERS[BookService.normalize_sort(sort_key)]
        with persistence_errors(db):
            return db.query(Book).filter(Book.user_id == user_id).order_by(*order_by).all()

    @staticmethod
    def get_book_for_edit(db: Session, user_id: int, book_id: int) -> Book:
        with persistence_errors(db):
            book = BookService._owned_by(db, user_id, book_id).first()
        if book is None:
            raise NotFound()
        return book

    @staticmethod
    def create_book(
        db: Session,
        user_id: int,
        fields: BookFields,
        cover_url: Optional[str] = None
    ) -> Book:
        book = Book(user_id=user_id, cover_url=cover_url, **fields.model_dump())
        with persistence_errors(db):
            db.add(book)
            db.commit()
            db.refresh(book)
        logger.info("User %s added book %s", user_id, book.id)
        return book

    @staticmethod
    def update_book(
        db: Session,
        user_id: int,
        book_id: int,
        fields: BookFields,
        cover_url: Optional[str] = None
    ) -> int:
        """
        Overwrite every editable field of the user's book.

        Returns the number of rows changed; 0 when the book does not exist
        or belongs to someone else, which is not an error.
        """
        values = fields.model_dump()
        values["cover_url"] = cover_url
        with persistence_errors(db):
            updated = BookService._owned_by(db, user_id, book_id).update(
                values, synchronize_session=False
            )
            db.commit()
        if updated:
            logger.info("User %s updated book %s", user_id, book_id)
        return updated

    @staticmethod
    def delete_book(db: Session, user_id: int, book_id: int) -> int:
        """Delete the user's book; returns rows removed (0 is a no-op, not an error)"""
        with persistence_errors(db):
            deleted = BookService._owned_by(db, user_id, book_id).delete(
                synchronize_session=False
            )
            db.commit()
        if deleted:
            logger.info("User %s deleted book %s", user_id, book_id)
        return deleted


book_service = BookService()
