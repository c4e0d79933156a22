"""Global exception handlers for FastAPI application."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agenda_service.core.database.exceptions import NotFoundError
from agenda_service.core.exceptions import AppException

logger = logging.getLogger(__name__)


def _create_problem_detail(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create RFC 7807 Problem Details response body.

    Args:
        status_code: HTTP status code.
        detail: Human-readable error description.
        type_: Error type identifier.
        title: Short human-readable summary.
        instance: URI identifying this occurrence.
        extra: Additional context information.
    """
    problem: dict[str, Any] = {
        "type": type_,
        "title": title or AppException._default_title(status_code),
        "status": status_code,
        "detail": detail,
    }
    if instance:
        problem["instance"] = instance
    if extra:
        problem.update(extra)
    return problem


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render AppException as RFC 7807 Problem Details."""
    logger.warning(
        "Application exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_create_problem_detail(
            status_code=exc.status_code,
            detail=exc.detail,
            type_=exc.type,
            title=exc.title,
            instance=exc.instance or request.url.path,
            extra=exc.extra,
        ),
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Repository lookups that escaped the service layer map to 404."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_create_problem_detail(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
            type_="not-found",
            instance=request.url.path,
        ),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures with field-level errors.

    Args:
        request: The FastAPI request object.
        exc: The validation error that was raised.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(errors),
            "errors": errors,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_create_problem_detail(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Request validation failed for {len(errors)} field(s)",
            type_="validation-error",
            title="Validation Error",
            instance=request.url.path,
            extra={"errors": errors},
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log the traceback and return a generic 500."""
    logger.error(
        "Unexpected exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_create_problem_detail(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request",
            type_="internal-error",
            title="Internal Server Error",
            instance=request.url.path,
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
