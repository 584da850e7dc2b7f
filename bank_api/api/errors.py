"""
Mapping of banking errors onto HTTP responses.

Routers let BankingError propagate (after rolling back their
session); the handler registered here turns it into a JSON body
of the form {"detail": message, "code": kind}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bank_api.errors import (
    AuthenticationFailed,
    BankingError,
    DuplicateKey,
    Forbidden,
    InsufficientFunds,
    InvalidAmount,
    InvalidTarget,
    NotFound,
    StorageConflict,
    StorageUnavailable,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[BankingError], int] = {
    InvalidAmount: 400,
    InvalidTarget: 400,
    InsufficientFunds: 400,
    NotFound: 404,
    DuplicateKey: 409,
    Forbidden: 403,
    AuthenticationFailed: 401,
    StorageConflict: 409,
    StorageUnavailable: 503,
}


def status_for(exc: BankingError) -> int:
    """Most specific mapped status for an error; 400 when none applies."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 400


async def banking_error_handler(request: Request, exc: BankingError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BankingError, banking_error_handler)
