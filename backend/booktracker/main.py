import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware
from booktracker.core.config import settings
from booktracker.core.database import engine, Base
from booktracker.core.exceptions import LoginRequired, NotFound, PersistenceFailure
from booktracker.api.routes import auth, books, covers
from booktracker.api.templating import render

# Register models on Base.metadata before create_all
from booktracker.models import book, user  # noqa: F401

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage app lifecycle events.

    Startup: configure logging and create tables if they don't exist
    (in production, use migrations instead of create_all)
    Shutdown: release pooled connections
    """
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info("Book tracker started")
    yield
    engine.dispose()


app = FastAPI(
    title="Book Tracker",
    description="Personal reading list with cover lookup",
    version="1.0.0",
    lifespan=lifespan
)

# Signed cookie sessions - the cookie holds only the user id
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)

app.include_router(auth.router)
app.include_router(books.router)
app.include_router(covers.router)


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return render(request, "error.html", {"message": exc.message}, status_code=404)


@app.exception_handler(PersistenceFailure)
@app.exception_handler(SQLAlchemyError)
async def persistence_failure_handler(request: Request, exc: Exception):
    # Details stay in the log; the client only sees a generic error
    logger.error("Request %s %s failed: %r", request.method, request.url.path, exc)
    return PlainTextResponse(
        "Something went wrong. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
