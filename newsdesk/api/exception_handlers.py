"""Centralized exception handlers for the FastAPI application.

Error Response Format:
    {
        "detail": "Human-readable error message",
        "code": "MACHINE_READABLE_ERROR_CODE"
    }
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from newsdesk.exceptions import ErrorCode, NewsdeskError

logger = logging.getLogger(__name__)


ERROR_CODE_TO_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: status.HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorCode.PROVIDER_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.QUEUE_FULL: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.DISPATCHER_CLOSED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.CANCELLED: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _create_error_response(
    status_code: int,
    message: str,
    code: str,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": message,
            "code": code,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the newsdesk exception handler on ``app``."""

    @app.exception_handler(NewsdeskError)
    async def newsdesk_exception_handler(
        request: Request,
        exc: NewsdeskError,
    ) -> JSONResponse:
        status_code = ERROR_CODE_TO_STATUS.get(
            exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR
        )

        logger.warning(
            "Search failed on %s %s: %s (code=%s, details=%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.code.value,
            exc.details,
        )

        return _create_error_response(
            status_code=status_code,
            message=exc.message,
            code=exc.code.value,
        )
