"""
Request Logger

HTTP middleware that times every request and writes one access-log line:

    2024/06/10 10:55:36 GET /users/1 status:Not Found duration:1ms 250μ
"""
import logging
import sys
import time
from datetime import datetime
from http import HTTPStatus
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("usersvc.access")

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"


def configure_access_logging():
    """Send access lines to stdout as-is; safe to call more than once."""
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def format_timestamp(moment: Optional[datetime] = None) -> str:
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def format_duration(milliseconds: float) -> str:
    """Render elapsed milliseconds as seconds, ms and μs, leaving out leading zero parts."""
    seconds = int(milliseconds / 1000)
    millis = int(milliseconds - seconds * 1000)
    micros = int((milliseconds % 1) * 1000)

    if not seconds and not millis:
        return f"{micros}μ"
    if not seconds:
        return f"{millis}ms {micros}μ"
    return f"{seconds}s {millis}ms {micros}μ"


def status_text(status_code: Optional[int]) -> str:
    try:
        return HTTPStatus(status_code or HTTPStatus.OK).phrase
    except ValueError:
        return "OK"


def format_access_line(method: str, path: str, status_code: int, milliseconds: float,
                       moment: Optional[datetime] = None) -> str:
    return (
        f"{format_timestamp(moment)} {method} {path} "
        f"status:{status_text(status_code)} duration:{format_duration(milliseconds)}"
    )


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The server answers unhandled errors with a 500.
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(format_access_line(
                request.method, request.url.path, HTTPStatus.INTERNAL_SERVER_ERROR, elapsed_ms
            ))
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(format_access_line(request.method, request.url.path, response.status_code, elapsed_ms))
        return response
