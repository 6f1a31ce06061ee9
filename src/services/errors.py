from __future__ import annotations

from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    """Base for errors rendered at the request boundary as `{"message": ...}`."""

    status_code = 500
    default_message = "An internal error occurred while processing your request."

    def __init__(self, message: Optional[str] = None, *, payload: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.payload = payload or {}


class NotFoundError(MarketplaceError):
    status_code = 404
    default_message = "No Records Found!"


class InsufficientFundsError(MarketplaceError):
    status_code = 402
    default_message = "Insufficient Balance!"


class UnauthorizedError(MarketplaceError):
    status_code = 403
    default_message = "User Is Not Authorized To Pay!"


class CapExceededError(MarketplaceError):
    status_code = 400
    default_message = "Maximum Deposit Amount Exceeded."


class InvalidAmountError(MarketplaceError):
    status_code = 400
    default_message = "Deposit amount must be positive."


class InvalidDateRangeError(MarketplaceError):
    status_code = 400
    default_message = "Invalid date range."


class UnauthenticatedError(MarketplaceError):
    status_code = 401
    default_message = "Unauthorized"


class TransactionFailure(MarketplaceError):
    """The store failed mid-transaction; everything was rolled back."""

    status_code = 409
    default_message = "Error! while processing the transaction"
