"""
api/routes/auth.py -- Registration, login and token check endpoints.

Routes:
  POST /SignUp           -- create an account; 201
  POST /SignIn           -- password login; returns a bearer token
  GET  /protected-route  -- echoes the caller's token claims (requires auth)

Security:
  Cache-Control: no-store on login responses so the token is not cached.
  Password hashes never leave the store: responses use UserResponse.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import (
    ClaimsResponse,
    ProtectedResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    UserResponse,
)
from auth import service
from auth.dependencies import get_current_claims
from auth.models import TokenClaims
from auth.store import UserStore

# Auth policy:
# - POST /SignUp:          public
# - POST /SignIn:          public
# - GET  /protected-route: requires a bearer token (get_current_claims)
router = APIRouter()


# Both handlers are plain `def` so bcrypt runs in the thread pool, not on the event loop.
@router.post("/SignUp", response_model=SignUpResponse, status_code=201)
def sign_up(request: Request, body: SignUpRequest) -> SignUpResponse:
    """Register a new user. Fails with 400 duplicate_email if the email is taken."""
    user_store: UserStore = request.app.state.user_store
    user = service.register(
        user_store,
        full_name=body.full_name,
        email=body.email,
        city=body.city,
        state=body.state,
        zip=body.zip,
        password=body.password,
    )
    return SignUpResponse(message="User registered successfully", user=UserResponse.from_user(user))


@router.post("/SignIn", response_model=SignInResponse)
def sign_in(request: Request, body: SignInRequest) -> JSONResponse:
    """Verify email and password; return a one-hour bearer token and the user.

    Unknown email -> 400 not_found, wrong password -> 401 bad_credentials.
    """
    user_store: UserStore = request.app.state.user_store
    token, user = service.login(user_store, body.email, body.password)
    resp = JSONResponse(
        status_code=200,
        content=SignInResponse(
            message="Login successful",
            token=token,
            user=UserResponse.from_user(user),
        ).model_dump(by_alias=True),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.get("/protected-route", response_model=ProtectedResponse)
async def protected_route(claims: TokenClaims = Depends(get_current_claims)) -> ProtectedResponse:
    """Return the decoded claims of the caller's token."""
    return ProtectedResponse(
        message="You have accessed a protected route!",
        user=ClaimsResponse.from_claims(claims),
    )
