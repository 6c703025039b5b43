"""
Global exception handlers.

APIException bodies are returned as-is, request validation errors become a
422 with per-field messages, and anything else is logged and reported as a
generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.utils.exceptions import APIException
from common.utils.responses import error_response
from common.utils.result import INTERNAL_ERROR_MESSAGE

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=error_response(_field_errors(exc), "VALIDATION_ERROR"),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(INTERNAL_ERROR_MESSAGE, "INTERNAL_ERROR"),
        )


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment
        loc = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", "Invalid value"),
        })
    return errors
