"""
FastAPI Middleware

Request ID propagation, access logging and processing-time headers.
"""

import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from idforge.core.logger import get_logger, reset_request_id, set_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Reads X-Request-ID from the request or generates a UUID. The ID is stored
    in request.state.request_id, bound to every log record emitted while the
    request is handled, and echoed on the response.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        token = set_request_id(request_id)
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one line per request, at a level chosen from the status code, and
    reports the processing time in the X-Process-Time header.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        logger.debug("Request: %s %s", method, path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed: %s %s - %s (%.3fs)",
                method,
                path,
                str(e),
                time.perf_counter() - start_time,
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        response.headers[PROCESS_TIME_HEADER] = f"{duration:.6f}"

        if response.status_code >= 500:
            log = logger.error
        elif response.status_code >= 400:
            log = logger.warning
        else:
            log = logger.info
        log("%s %s - %d (%.3fs)", method, path, response.status_code, duration)
        return response
