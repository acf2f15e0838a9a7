from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class BookFields(BaseModel):
    """Editable fields of a book as submitted by the add/edit form"""

    title: Optional[str] = Field(default=None, validate_default=True)
    author: Optional[str] = None
    isbn: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    finished_on: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # HTML forms submit "" for untouched inputs; store those as NULL
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("title")
    @classmethod
    def title_required(cls, value: Optional[str]) -> str:
        if not value:
            raise ValueError("Title is required")
        return value


class CoverResponse(BaseModel):
    isbn: str
    cover_url: str
