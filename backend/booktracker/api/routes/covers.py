from fastapi import APIRouter
from booktracker.schemas.book import CoverResponse
from booktracker.services.cover_service import cover_service

router = APIRouter(prefix="/api", tags=["covers"])


@router.get("/cover/{isbn}", response_model=CoverResponse)
def get_cover(isbn: str):
    """Cover URL for an ISBN, or the placeholder image when none is found"""
    return CoverResponse(isbn=isbn, cover_url=cover_service.cover_or_placeholder(isbn))
