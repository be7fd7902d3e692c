"""
Exception → JSON response mapping.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.exceptions import AccountError, MailDispatchError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {"message": "Internal Server Error"}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the account-flow error handlers to ``app``."""

    @app.exception_handler(MailDispatchError)
    async def mail_dispatch_failed(request: Request, exc: MailDispatchError):
        logger.error(
            "Error during %s %s: mail dispatch failed: %r",
            request.method, request.url.path, exc.__cause__,
        )
        return JSONResponse(status_code=exc.status_code, content=INTERNAL_ERROR)

    @app.exception_handler(AccountError)
    async def account_error(request: Request, exc: AccountError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.debug("Invalid body for %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Error during %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR,
        )
