"""
JSON error bodies for the public API.

Every error response has the shape {"error": "<message>", ...}, including
request-validation failures (mapped to 400 instead of FastAPI's 422).
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

MSG_INVALID_BODY = "Invalid request body"
MSG_INTERNAL_ERROR = "Internal server error"


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, MSG_INVALID_BODY)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
