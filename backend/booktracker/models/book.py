from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from booktracker.core.database import Base


class Book(Base):
    """
    A book on a user's reading list.

    Every row belongs to exactly one user; all lookups filter on both
    id and user_id.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    author = Column(String, nullable=True)
    isbn = Column(String, nullable=True)
    # Resolved from the ISBN when the book is saved; NULL renders the placeholder
    cover_url = Column(String, nullable=True)
    rating = Column(Integer, nullable=True)
    finished_on = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="books")
