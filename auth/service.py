"""
auth/service.py -- Registration and login.

Both functions take the UserStore explicitly so route handlers stay thin and
tests can drive them against an in-memory store without HTTP.

Layer rule: no imports from api/ or auction/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password, verify_password
from core.errors import DuplicateEmail, InvalidCredentials, UserNotFound

logger = logging.getLogger("auction.auth")


def register(
    store: UserStore,
    full_name: str,
    email: str,
    city: str,
    state: str,
    zip: str,
    password: str,
) -> User:
    """Create a user account and return the stored record.

    Raises DuplicateEmail if the email is already registered. The
    IntegrityError branch covers two sign-ups racing past the lookup.
    """
    if store.get_by_email(email) is not None:
        raise DuplicateEmail()

    user = User(
        full_name=full_name,
        email=email,
        city=city,
        state=state,
        zip=zip,
        hashed_password=hash_password(password),
    )
    try:
        user.id = store.create_user(user)
    except IntegrityError as exc:
        raise DuplicateEmail() from exc

    logger.info("Registered user id=%s", user.id)
    return store.get_by_id(user.id) or user


def login(store: UserStore, email: str, password: str) -> tuple[str, User]:
    """Verify credentials and issue a bearer token.

    Returns (token, user). Raises UserNotFound for an unknown email and
    InvalidCredentials when the password does not match.
    """
    user = store.get_by_email(email)
    if user is None:
        raise UserNotFound()
    if not verify_password(password, user.hashed_password):
        logger.info("Failed login for user id=%s", user.id)
        raise InvalidCredentials()

    token = create_access_token(user.id, user.email, user.full_name)
    return token, user
