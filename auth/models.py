"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in auction/models.py -- dataclasses own domain shape; stores and services do
the work.

Layer rule: no imports from api/ or auction/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered bidder/seller.

    email is the natural key: it is unique across users and it is the identity
    recorded as an item's creator. hashed_password is a bcrypt hash; the
    plaintext is never stored.

    id is None before the record is written to the database.
    """

    full_name: str
    email: str
    hashed_password: str
    city: str = ""
    state: str = ""
    zip: str = ""
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Decoded claims of a verified bearer token.

    Exposed to route handlers by auth.dependencies.get_current_claims so they
    can compare the caller's email against a resource's creator.
    """

    user_id: int
    email: str
    full_name: str | None = None
