# errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"detail": self.message}


class ValidationFailed(ApiError):
    status_code = 422

    def __init__(self, errors: list):
        super().__init__("Validation failed")
        self.errors = errors

    def to_body(self) -> dict:
        return {"detail": self.message, "errors": self.errors}


class Conflict(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Unauthenticated(ApiError):
    status_code = 401


class UpstreamFailure(ApiError):
    status_code = 500


# -------------------------------
# Handlers
# -------------------------------

def _field_name(loc) -> str:
    # loc looks like ("body", "genre", "name"); drop the request section
    parts = [str(p) for p in loc[1:]] or [str(p) for p in loc]
    return ".".join(parts)


async def api_error_handler(request: Request, exc: ApiError):
    if isinstance(exc, UpstreamFailure):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content={"detail": "Validation failed", "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
