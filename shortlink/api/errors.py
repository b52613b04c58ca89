"""
Error Handlers

Translates exceptions into JSON error bodies at the request boundary:
- LinkShortenerError subclasses use their own status code and public message
- Request body validation errors become 400 Invalid request
- Anything else is logged with its traceback and becomes 500
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlink.core.exceptions import InvalidRequestError, LinkShortenerError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def link_shortener_error_handler(request: Request, exc: LinkShortenerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(exc.status_code, exc.public_message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path}: invalid request body: {exc.errors()}")
    return error_response(InvalidRequestError.status_code, InvalidRequestError.public_message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_response(500, LinkShortenerError.public_message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LinkShortenerError, link_shortener_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
