"""Structured Logging — JSON formatter, setup and optional per-request logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (project, issue_id, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once on startup via lifespan
    - Request logging is opt-in (settings.log_requests) and numbers requests
      so the start and finish lines of one request can be paired
"""

import itertools
import logging
import json
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import Request, Response

EXTRA_FIELDS = (
    "project", "issue_id", "error_code", "operation",
    "path", "method", "status_code", "request_number",
)

request_logger = logging.getLogger("issue_tracker.requests")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def make_request_logger() -> Callable[
    [Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response],
]:
    """Build an HTTP middleware that logs the start and end of every request."""
    counter = itertools.count(1)

    async def log_request(request: Request, call_next) -> Response:
        number = next(counter)
        extra = {
            "request_number": number,
            "method": request.method,
            "path": request.url.path,
        }
        request_logger.info(f"New request {number} {request.method} {request.url}", extra=extra)
        response = await call_next(request)
        request_logger.info(
            f"Request ended {number} {request.method} {request.url}",
            extra={**extra, "status_code": response.status_code},
        )
        return response

    return log_request
