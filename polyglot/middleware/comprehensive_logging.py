"""
Comprehensive logging middleware for the Polyglot server.

Logs the start and completion of every HTTP request with status and timing,
and binds a request id into the structlog context for the request's duration.

IMPLEMENTATION NOTE: pure ASGI instead of BaseHTTPMiddleware so the status
code is observed from the raw ``http.response.start`` message.
"""

import time
import uuid

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..structured_logging.enhanced_logging_config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)


class ComprehensiveLoggingMiddleware:
    """Pure ASGI middleware for request/response and error logging."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        logger.info("ComprehensiveLoggingMiddleware initialized")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        request_id = scope.setdefault("state", {}).setdefault("request_id", str(uuid.uuid4()))
        bind_request_context(correlation_id=request_id, request_id=request_id)
        start_time = time.time()

        self._log_request_start(request)

        status_code = 500
        response_started = False

        async def send_with_logging(message: Message) -> None:
            nonlocal status_code, response_started

            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                response_started = True

            await send(message)

        try:
            await self.app(scope, receive, send_with_logging)

            if response_started:
                self._log_request_completed(request, status_code, time.time() - start_time)
        except Exception as e:
            self._log_request_error(request, e, time.time() - start_time)
            raise
        finally:
            clear_request_context()

    def _log_request_start(self, request: Request) -> None:
        logger.info(
            "HTTP request started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent", "unknown"),
        )

    def _log_request_completed(self, request: Request, status_code: int, process_time: float) -> None:
        log = logger.warning if status_code >= 500 else logger.info
        log(
            "HTTP request completed",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            process_time=round(process_time, 4),
        )

    def _log_request_error(self, request: Request, error: Exception, process_time: float) -> None:
        logger.error(
            "Unhandled exception in request",
            path=request.url.path,
            method=request.method,
            error=str(error),
            process_time=round(process_time, 4),
            exc_info=True,
        )
