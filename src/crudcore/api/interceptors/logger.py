import logging
import time
from typing import Any

from .base import CallNext, ExecutionContext, Interceptor


class LoggerInterceptor(Interceptor):
    """Logs `"<METHOD> - <status>: <url> - <n>ms"` once the endpoint has returned."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("crudcore.api.requests")

    async def intercept(self, context: ExecutionContext, call_next: CallNext) -> Any:
        adapter = context.adapter
        start = time.perf_counter()
        result = await call_next()
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        self.logger.info(
            "%s - %s: %s - %dms",
            adapter.method,
            adapter.status,
            adapter.url,
            elapsed_ms,
            extra={"handler": context.handler_name, "duration_ms": elapsed_ms},
        )
        return result
