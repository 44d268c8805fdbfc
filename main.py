"""
Main application entry point for the contact book.

This module initializes the FastAPI application, configures logging,
installs the signed-cookie session middleware, registers exception
handlers, and includes the routers for authentication and contacts.

Modules:
- FastAPI: Web framework
- SessionMiddleware: Signed cookie sessions
- contactbook.database: Database engine
- contactbook.models: SQLAlchemy models
- contactbook.contacts: Contacts router
- contactbook.auth: Authentication router
- contactbook.core: Application settings
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from contactbook.database import engine, SessionLocal
from contactbook import models, contacts, crud
from contactbook.auth import (
    SIGN_IN_PATH,
    SignInRequired,
    get_password_hash,
    router as auth_router,
)
from contactbook.core import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("contactbook")

# Create tables (for development only)
models.Base.metadata.create_all(bind=engine)

# Initialize FastAPI application
app = FastAPI(title="Contact Book")

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    https_only=settings.HTTPS_ONLY,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path and status of every request."""
    response = await call_next(request)
    logger.info("%s %s %s", request.method, request.url.path, response.status_code)
    return response


@app.exception_handler(SignInRequired)
async def sign_in_required_handler(request: Request, exc: SignInRequired):
    """Send anonymous visitors to the sign-in page."""
    return RedirectResponse(SIGN_IN_PATH, status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Answer HTTP errors with their message as plain text."""
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors and answer with a generic message."""
    logger.exception("Unhandled exception: %s", exc)
    return PlainTextResponse(
        "Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@app.on_event("startup")
def seed_user():
    """
    FastAPI startup event handler.

    Creates the configured seed user when ``SEED_USERNAME`` and
    ``SEED_PASSWORD`` are set and the user does not exist yet.
    """
    if not (settings.SEED_USERNAME and settings.SEED_PASSWORD):
        return
    db = SessionLocal()
    try:
        if crud.get_user_by_username(db, settings.SEED_USERNAME) is None:
            crud.create_user(
                db, settings.SEED_USERNAME, get_password_hash(settings.SEED_PASSWORD)
            )
            logger.info("Created seed user %r", settings.SEED_USERNAME)
    finally:
        db.close()


# Include routers for application areas
app.include_router(auth_router)
app.include_router(contacts.router)


@app.get("/")
def root():
    """Redirect to the contact list."""
    return RedirectResponse("/contacts", status_code=status.HTTP_303_SEE_OTHER)
