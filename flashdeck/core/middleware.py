"""
Middleware для обработки запросов.
"""

import logging
import time
import uuid
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from flashdeck.shared.context import bind_request

logger = logging.getLogger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware для трейсинга и логирования запросов.

    Добавляет request ID ко всем запросам, кладёт его в контекст
    (ошибки и логи подхватывают trace_id) и возвращает в заголовках.
    """

    SKIP_LOG_ENDPOINTS: set[str] = {"/observability/health", "/observability/live"}

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Обработать запрос с трейсингом."""
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        request.state.request_id = request_id
        bind_request(request_id, request.headers.get("X-Trace-ID"))

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        response.headers["X-Request-ID"] = request_id

        if request.url.path not in self.SKIP_LOG_ENDPOINTS:
            logger.info(
                "%s %s -> %d (%.1f ms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id, "status_code": response.status_code},
            )

        return response
