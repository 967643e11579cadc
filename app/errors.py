"""
Exception classes for Markdown Explorer.

Services raise these; the handlers registered by ``register_exception_handlers``
turn them into JSON error responses at the request boundary.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class ExplorerError(Exception):
    """Base exception for Markdown Explorer"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExplorerError):
    """Missing or malformed client input"""
    status_code = 400


class UnsupportedModelError(ValidationError):
    """Requested summarization model is not registered"""


class AuthenticationError(ExplorerError):
    """Bearer token present but unusable"""
    status_code = 401


class NotFoundError(ExplorerError):
    """Resource not found"""
    status_code = 404


class ConflictError(ExplorerError):
    """Unique constraint would be violated"""
    status_code = 409


class PersistenceError(ExplorerError):
    """Write to the store failed"""
    status_code = 500


class ProviderError(ExplorerError):
    """External summarization service failed"""
    status_code = 500


class StorageUnavailableError(ExplorerError):
    """Database could not be reached"""
    status_code = 503


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


async def explorer_error_handler(request: Request, exc: ExplorerError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query"))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _error_response(400, "; ".join(parts) or "Invalid request")


async def operational_error_handler(request: Request, exc: OperationalError):
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
    return _error_response(503, "Database connection failed, please try again later")


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error during %s %s", request.method, request.url.path)
    return _error_response(500, str(getattr(exc, "orig", None) or exc))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ExplorerError, explorer_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
