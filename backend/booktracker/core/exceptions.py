"""
Error taxonomy for the book tracker.

Services raise these; the route layer and the exception handlers in
main.py translate them into redirects or error pages.
"""


class BookTrackerError(Exception):
    """Base class for application errors"""

    message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class DuplicateEmail(BookTrackerError):
    message = "An account with that email already exists."


class InvalidCredentials(BookTrackerError):
    # Same text for unknown email and wrong password
    message = "Invalid email or password."


class NotFound(BookTrackerError):
    message = "Book not found"


class ExternalLookupFailure(BookTrackerError):
    message = "Cover lookup failed"


class PersistenceFailure(BookTrackerError):
    message = "Database error occurred"


class LoginRequired(BookTrackerError):
    message = "Please log in to continue."
