"""
API request and response models for the auction REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py and
auction/models.py, which own the internal domain representation. Route
handlers map between the two.

Wire names are camelCase (itemName, currentBid, _id, ...). Each field carries
an explicit alias; populate_by_name lets route code build models with the
snake_case field names, and FastAPI serializes response models by alias.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auction.models import Item
from auth.models import TokenClaims, User
from auth.tokens import MAX_PASSWORD_BYTES

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignUpRequest(BaseModel):
    """Request body for POST /SignUp."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    full_name: str = Field(alias="fullName", min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    city: str = Field(default="", max_length=100)
    state: str = Field(default="", max_length=100)
    zip: str = Field(default="", max_length=20)
    password: str = Field(alias="pass", min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return v


class SignInRequest(BaseModel):
    """Request body for POST /SignIn."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(alias="pass", min_length=1, max_length=255)


class ItemCreate(BaseModel):
    """Request body for POST /post-item.

    There is deliberately no creator field: the creator is the authenticated
    caller. A creator key in the body is ignored.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    id: int = Field(alias="_id")
    item_name: str = Field(alias="itemName", min_length=1, max_length=255)
    description: str = ""
    current_bid: float = Field(default=0, alias="currentBid", allow_inf_nan=False)
    highest_bidder: str = Field(default="", alias="highestBidder", max_length=255)
    is_closed: bool = Field(default=False, alias="isClosed")
    ending_time: datetime = Field(alias="endingTime")


class ItemEdit(BaseModel):
    """Request body for PUT /edit-item/{id} -- full replace of editable fields."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    item_name: str = Field(alias="itemName", min_length=1, max_length=255)
    description: str = ""
    current_bid: float = Field(default=0, alias="currentBid", allow_inf_nan=False)
    highest_bidder: str = Field(default="", alias="highestBidder", max_length=255)
    is_closed: bool = Field(default=False, alias="isClosed")
    ending_time: datetime = Field(alias="endingTime")


class BidRequest(BaseModel):
    """Request body for PUT /update-bid.

    All fields are optional at the schema level; the route performs the
    presence check so a missing field yields the "Missing required fields"
    validation error rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    item_id: Optional[int] = Field(default=None, alias="itemID")
    bid_amount: Optional[float] = Field(default=None, alias="bidAmount", allow_inf_nan=False)
    highest_bidder: Optional[str] = Field(default=None, alias="highestBidder", max_length=255)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public projection of a user. Never includes the password hash."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    full_name: str = Field(alias="fullName")
    email: str
    city: str
    state: str
    zip: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            full_name=user.full_name,
            email=user.email,
            city=user.city,
            state=user.state,
            zip=user.zip,
        )


class ItemResponse(BaseModel):
    """Full item record as returned by every item endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(alias="_id")
    item_name: str = Field(alias="itemName")
    description: str
    current_bid: float = Field(alias="currentBid")
    highest_bidder: str = Field(alias="highestBidder")
    ending_time: datetime = Field(alias="endingTime")
    is_closed: bool = Field(alias="isClosed")
    creator: str

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        """Build an ItemResponse from a domain Item."""
        return cls(
            id=item.id,
            item_name=item.item_name,
            description=item.description,
            current_bid=item.current_bid,
            highest_bidder=item.highest_bidder,
            ending_time=item.ending_time,
            is_closed=item.is_closed,
            creator=item.creator,
        )


class SignUpResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: UserResponse


class SignInResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    user: UserResponse


class ClaimsResponse(BaseModel):
    """Decoded token claims, echoed back by GET /protected-route."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user_id: int = Field(alias="userId")
    email: str
    full_name: Optional[str] = Field(default=None, alias="fullName")

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "ClaimsResponse":
        return cls(user_id=claims.user_id, email=claims.email, full_name=claims.full_name)


class ProtectedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: ClaimsResponse


class ItemEnvelope(BaseModel):
    """Response for POST /post-item and PUT /update-bid."""

    model_config = ConfigDict(frozen=True)

    message: str
    item: ItemResponse


class ItemDeletedResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    deleted_item: ItemResponse = Field(alias="deletedItem")


class ItemUpdatedResponse(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    updated_item: ItemResponse = Field(alias="updatedItem")


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str
    version: str
    components: dict[str, str]
