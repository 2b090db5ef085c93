"""Domain errors raised by services and their HTTP mapping."""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from .config import settings

logger = logging.getLogger(__name__)


class SalonError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SalonError):
    """Malformed or missing input: bad dates, out-of-range day of week, missing time fields."""
    status_code = 400


class NotFoundError(SalonError):
    status_code = 404


class ConflictError(SalonError):
    """The requested interval is already held by an occupying appointment."""
    status_code = 409


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SalonError)
    async def salon_error_handler(request: Request, exc: SalonError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} for {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.critical(f"Unhandled exception for request {request.method} {request.url.path}", exc_info=True)
        content = {"error": "An internal server error occurred."}
        if settings.ENV != "prod":
            content["details"] = str(exc)
        return JSONResponse(status_code=500, content=content)
