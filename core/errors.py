"""
core/errors.py -- Domain error taxonomy for the auction backend.

Services raise these; api/main.py maps every AuctionError onto the shared
ErrorResponse envelope with the status_code carried by the exception. Route
handlers never build error responses by hand.

Layer rule: no imports from api/, auth/, or auction/.
"""

from typing import Optional


class AuctionError(Exception):
    """Base class. status_code is the HTTP-equivalent severity."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message)


class NotFound(AuctionError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class UserNotFound(NotFound):
    """Unknown email at login. Reported as 400, matching the sign-in contract."""

    status_code = 400
    message = "User not found."


class ItemNotFound(NotFound):
    message = "Item not found."


class DuplicateEmail(AuctionError):
    status_code = 400
    code = "duplicate_email"
    message = "This email is already in use."


class DuplicateItem(AuctionError):
    status_code = 409
    code = "duplicate_item"
    message = "An item with that id already exists."


class InvalidCredentials(AuctionError):
    status_code = 401
    code = "bad_credentials"
    message = "Invalid credentials."


class MissingToken(AuctionError):
    status_code = 403
    code = "missing_token"
    message = "Access denied, token missing."


class InvalidToken(AuctionError):
    status_code = 401
    code = "invalid_token"
    message = "Invalid token."


class Forbidden(AuctionError):
    status_code = 403
    code = "forbidden"
    message = "You are not allowed to modify this resource."


class BiddingClosed(AuctionError):
    status_code = 400
    code = "bidding_closed"
    message = "Bidding is closed for this item."


class BidTooLow(AuctionError):
    status_code = 400
    code = "bid_too_low"
    message = "Bid must be higher than current bid."


class BidConflict(AuctionError):
    status_code = 409
    code = "bid_conflict"
    message = "The item changed while the bid was being placed. Please retry."


class ValidationError(AuctionError):
    status_code = 400
    code = "validation_error"
    message = "Missing required fields."


class InternalError(AuctionError):
    pass
