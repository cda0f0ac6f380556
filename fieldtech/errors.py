"""Error taxonomy and the handlers that render it as the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class FieldTechError(Exception):
    """Base class for errors that map onto a client-visible status."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class ValidationError(FieldTechError):
    """Missing or malformed input. The request has no effect."""

    status_code = 400


class NotFoundError(FieldTechError):
    status_code = 404


class UnauthenticatedError(FieldTechError):
    status_code = 401


def error_body(error: str, **extra) -> dict:
    return {"success": False, "error": error, **extra}


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    msg = first.get("msg", "Invalid value")
    return f"{location}: {msg}" if location else msg


def register_exception_handlers(app: FastAPI, *, expose_internal: bool = False) -> None:
    """Install handlers so every failure uses the {success: false, error} envelope."""

    @app.exception_handler(FieldTechError)
    async def _fieldtech_error(request: Request, exc: FieldTechError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error_body(_describe_validation_error(exc)))

    @app.exception_handler(HTTPException)
    async def _http_error(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        extra = {"message": str(exc)} if expose_internal else {}
        return JSONResponse(status_code=500, content=error_body("Internal server error", **extra))
