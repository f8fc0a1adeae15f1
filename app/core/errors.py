"""Domain errors and their HTTP mapping."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(AppError):
    """User or resource absent. No state was changed."""

    status_code = 404


class ValidationError(AppError):
    """Missing or malformed input, raised before any persistence call."""

    status_code = 400


class Forbidden(AppError):
    status_code = 403


class DependencyFailure(AppError):
    """Database or mail server unreachable."""

    status_code = 500


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, DependencyFailure):
        logger.error("Dependency failure on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Server error"})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
