"""
auth/tokens.py -- JWT and password hashing utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry
       userId, email, optional fullName, and expiry. Verification returns None
       on any failure -- auth.dependencies turns that into InvalidToken.

  Passwords: bcrypt directly. bcrypt.gensalt() gives every password its own
       salt and checkpw() compares in constant time.

  SECRET_KEY: sourced from core.config.get_settings() once, at module load.
       Issuance and verification always use the same key.

Layer rule: no imports from api/ or auction/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims
from core.config import get_settings

logger = logging.getLogger("auction.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# bcrypt rejects longer input rather than truncating it.
MAX_PASSWORD_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError if the password is longer than MAX_PASSWORD_BYTES once
    UTF-8 encoded. SignUpRequest rejects such passwords before they get here.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password is longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A password too long to have been hashed can never match.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    email: str,
    full_name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Encode a signed JWT with user identity and expiry.

    Args:
        user_id:       Numeric user ID stored in the DB.
        email:         Email, also stored as the JWT subject claim.
        full_name:     Optional display name.
        expires_delta: Token lifetime. Defaults to Settings.token_expire_seconds
                       (one hour).
    """
    if expires_delta is None:
        expires_delta = timedelta(seconds=_settings.token_expire_seconds)
    payload = {
        "sub": email,
        "userId": user_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    if full_name:
        payload["fullName"] = full_name
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> TokenClaims | None:
    """Decode and verify a JWT. Returns the claims or None on any failure.

    Signature, expiry and the presence of userId/email are all checked.
    """
    try:
        payload = jwt.decode(token, _settings.secret_key, algorithms=[_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
    if "userId" not in payload or "email" not in payload:
        return None
    return TokenClaims(
        user_id=payload["userId"],
        email=payload["email"],
        full_name=payload.get("fullName"),
    )
