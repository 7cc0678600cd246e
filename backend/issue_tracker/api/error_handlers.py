"""Error Handlers — global exception handlers for the issue API.

Invariants:
    - IssueTrackerError → text/plain body holding exactly exc.message, status exc.http_status
    - RequestValidationError → 400 "invalid input data"
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (IssueTrackerError), validation (Pydantic), catch-all (Exception)
    - Plain-text bodies: clients compare the message strings directly
    - Client errors logged at WARNING, server errors at ERROR
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from fastapi.exceptions import RequestValidationError

from issue_tracker.core.errors import IssueTrackerError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_issue_tracker_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_issue_tracker_error_handler(app: FastAPI) -> None:
    @app.exception_handler(IssueTrackerError)
    async def issue_tracker_error_handler(request: Request, exc: IssueTrackerError):
        """Handle all domain/infrastructure errors."""
        level = logging.WARNING if exc.http_status < 500 else logging.ERROR
        logger.log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                **exc.to_log_extra(),
                "path": request.url.path,
                "method": request.method,
            },
        )
        return PlainTextResponse(exc.message, status_code=exc.http_status)


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return PlainTextResponse(
            "invalid input data", status_code=status.HTTP_400_BAD_REQUEST,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return PlainTextResponse(
            "internal error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
