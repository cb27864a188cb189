"""
Exception handlers

Translate service, validation, persistence and storage errors into the
standard response envelope without leaking raw storage errors.
"""

import logging
import traceback
from typing import Any, Iterable, List, Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from custody_service.config.settings import Settings
from custody_service.core.errors import AppError
from custody_service.models.responses import ApiResponse

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str, data: Any = None) -> JSONResponse:
    body = ApiResponse.fail(message, data=data).model_dump(mode="json")
    return JSONResponse(status_code=status_code, content=body)


def _field_errors(errors: Iterable[Mapping[str, Any]]) -> List[dict]:
    details = []
    for error in errors:
        # Drop the "body"/"query"/"path" location prefix
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        details.append({"field": ".".join(location) or "request", "reason": error.get("msg", "invalid")})
    return details


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Attach all exception handlers to the application"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = _field_errors(exc.errors())
        message = ", ".join(f"{d['field']}: {d['reason']}" for d in details)
        return _envelope(400, message, data={"errors": details})

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning(f"Integrity violation on {request.method} {request.url.path}: {exc.orig}")
        return _envelope(409, "Resource already exists")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        data = None
        if settings.environment == "development":
            data = {"stack": traceback.format_exception(type(exc), exc, exc.__traceback__)}
        return _envelope(500, "Internal server error", data=data)
