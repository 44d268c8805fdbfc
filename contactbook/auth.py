"""Authentication routes and helpers.

Sign-in state lives in the signed session cookie: a successful sign-in
stores the username and a ``signed_in`` flag, sign-out removes both.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import crud
from .database import get_db
from .models import User
from .views import flash, render

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
router = APIRouter(prefix="/contacts", tags=["auth"])

SIGN_IN_PATH = "/contacts/sign-in"


class SignInRequired(Exception):
    """Raised when a page needs an authenticated session."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plain password with its hashed value."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate a password hash using the configured context."""
    return pwd_context.hash(password)


def verify_credentials(db: Session, username: str, password: str) -> bool:
    """
    Check a username/password pair against the stored hash.

    An unknown username fails the same way as a wrong password.

    Args:
        db (Session): Database session.
        username (str): Login name.
        password (str): Plain text password.

    Returns:
        bool: ``True`` if the password matches the user's hash.
    """
    user = crud.get_user_by_username(db, username)
    if user is None:
        return False
    return verify_password(password, user.password_hash)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency that returns the signed-in user from the session."""

    username = request.session.get("username")
    if not request.session.get("signed_in") or not username:
        raise SignInRequired()
    user = crud.get_user_by_username(db, username)
    if user is None:
        request.session.pop("username", None)
        request.session.pop("signed_in", None)
        raise SignInRequired()
    return user


@router.get("/sign-in")
def sign_in_page(request: Request):
    """Render the sign-in form."""
    return render(request, "sign_in.html")


@router.post("/sign-in")
def sign_in(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    db: Session = Depends(get_db),
):
    """Authenticate the user and mark the session as signed in."""

    if not verify_credentials(db, username, password):
        logger.info("Failed sign-in for %r", username)
        flash(request, "error", "Incorrect username or password.")
        return render(request, "sign_in.html", {"username": username})

    request.session["username"] = username
    request.session["signed_in"] = True
    logger.info("User %r signed in", username)
    return RedirectResponse("/contacts", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/sign-out")
def sign_out(request: Request):
    """Clear the session and return to the sign-in page."""
    request.session.pop("username", None)
    request.session.pop("signed_in", None)
    return RedirectResponse(SIGN_IN_PATH, status_code=status.HTTP_303_SEE_OTHER)
