"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Only one auth method exists: the Authorization: Bearer <token> header. The
token is self-contained, so no store lookup happens here; the decoded claims
are handed to the route, which performs any ownership checks itself.

  get_current_claims() raises MissingToken (403) when no bearer credential is
  present and InvalidToken (401) when signature or expiry verification fails.

Layer rule: no imports from api/ or auction/. This module may import from
fastapi because it is part of the dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import TokenClaims
from auth.tokens import decode_access_token
from core.errors import InvalidToken, MissingToken


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_claims(request: Request) -> TokenClaims:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.post("/post-item")
        async def route(claims: TokenClaims = Depends(get_current_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        raise MissingToken()
    claims = decode_access_token(token)
    if claims is None:
        raise InvalidToken()
    return claims
