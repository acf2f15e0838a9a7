from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from booktracker.core.database import Base


class User(Base):
    """
    User model representing application users.

    Stores login credentials only. Passwords are stored as salted bcrypt
    hashes (never plaintext). Rows are never updated or deleted.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Email is unique and indexed for fast lookups during login
    # Compared exactly as stored (case-sensitive)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
