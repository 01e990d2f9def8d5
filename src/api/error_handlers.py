"""
Error handlers - Wire validation rejections and the error pipeline into FastAPI.

Invariants:
    - ValidationRejected -> 422 JSON list of {field: message}, never logged or alerted
    - HTTPException -> error pipeline (404 becomes a NOT_FOUND failure)
    - ServiceError -> error pipeline at the ExceptionMiddleware level (not re-raised)
    - Exception (catch-all) -> error pipeline, 404 or 500 text body, no stack traces
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.dependencies import get_error_pipeline
from src.api.routes import original_url
from src.domain.exceptions import NotFoundError, ServiceError, ValidationRejected
from src.domain.failures import Failure

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_validation_rejected_handler(app)
    _register_http_exception_handler(app)
    _register_service_error_handler(app)
    _register_failure_handler(app)


async def run_error_pipeline(request: Request, exc: Exception) -> PlainTextResponse:
    """Turn an exception into a Failure and answer with the pipeline's response."""
    failure = Failure.from_exception(exc)
    logger.error(
        "Failure on %s %s: %s: %s",
        request.method,
        request.url.path,
        failure.name,
        failure.message,
    )
    result = await get_error_pipeline(request).handle(failure)
    return PlainTextResponse(result.body, status_code=result.status_code)


def _register_validation_rejected_handler(app: FastAPI) -> None:
    """Register the 422 short-circuit for validator errors."""

    @app.exception_handler(ValidationRejected)
    async def validation_rejected_handler(request: Request, exc: ValidationRejected):
        return JSONResponse(
            status_code=422,
            content=[error.as_dict() for error in exc.errors],
        )


def _register_http_exception_handler(app: FastAPI) -> None:
    """Route framework HTTP errors through the pipeline."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            not_found = NotFoundError(f"Page not found on this path: {original_url(request)}")
            return await run_error_pipeline(request, not_found)
        return await run_error_pipeline(request, exc)


def _register_service_error_handler(app: FastAPI) -> None:
    """Route expected service errors through the pipeline without a server re-raise."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return await run_error_pipeline(request, exc)


def _register_failure_handler(app: FastAPI) -> None:
    """Register the catch-all for unexpected exceptions (Starlette re-raises these)."""

    @app.exception_handler(Exception)
    async def failure_handler(request: Request, exc: Exception):
        return await run_error_pipeline(request, exc)
