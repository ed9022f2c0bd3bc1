"""Mapping of marketplace errors onto HTTP responses."""
from fastapi import HTTPException

from marketplace.errors import (
    ErrorCategory,
    InvalidInputError,
    MarketplaceError,
    NotFoundError,
    PurchaseInProgressError,
)

CATEGORY_STATUS_CODES = {
    ErrorCategory.WALLET_NOT_INSTALLED: 503,
    ErrorCategory.USER_REJECTED: 400,
    ErrorCategory.INSUFFICIENT_FUNDS: 402,
    ErrorCategory.GAS_LIMIT_EXCEEDED: 422,
    ErrorCategory.EXECUTION_REVERTED: 422,
    ErrorCategory.WRONG_NETWORK: 412,
    ErrorCategory.UNKNOWN: 502,
}


def to_http_exception(exc: Exception) -> HTTPException:
    """Convert a service-layer error into an HTTPException with a categorized detail."""
    if isinstance(exc, MarketplaceError):
        return HTTPException(status_code=CATEGORY_STATUS_CODES[exc.category], detail=exc.to_dict())
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail={"category": "not_found", "message": str(exc)})
    if isinstance(exc, PurchaseInProgressError):
        return HTTPException(status_code=409, detail={"category": "in_progress", "message": str(exc)})
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=400, detail={"category": "invalid_input", "message": str(exc)})
    return HTTPException(status_code=500, detail={"category": "internal", "message": "Internal server error"})


SERVICE_ERRORS = (MarketplaceError, NotFoundError, PurchaseInProgressError, InvalidInputError)
