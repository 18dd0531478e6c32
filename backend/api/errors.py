"""
Exception handlers turning errors into JSON `{"message": ...}` responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.errors import JacketError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def status_for(exc: JacketError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    return 500


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def jacket_error_handler(request: Request, exc: JacketError):
    status_code = status_for(exc)
    if status_code >= 500:
        # Codec and processing details stay in the server log
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _message(status_code, "Failed to process jacket image")
    return _message(status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _message(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _message(400, message)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _message(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JacketError, jacket_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
