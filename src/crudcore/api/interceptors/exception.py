import logging
from datetime import datetime, timezone
from typing import Any

from .base import CallNext, ExecutionContext, Interceptor


class ExceptionInterceptor(Interceptor):
    """
    Logs any exception raised below it, then raises the platform's translation of it.

    - starlette: the original exception, unchanged.
    - asgi: `HTTPException(400)` whose detail is the original exception's payload.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("crudcore.api.errors")

    async def intercept(self, context: ExecutionContext, call_next: CallNext) -> Any:
        adapter = context.adapter
        # captured before the call, like the response status it reports
        method, url, status_code = adapter.method, adapter.url, adapter.status
        try:
            return await call_next()
        except Exception as exc:
            self.logger.error(
                "Error encountered when hitting %s - %s - status: %s - timestamp: %s",
                method,
                url,
                status_code,
                datetime.now(timezone.utc).isoformat(),
                exc_info=exc,
                extra={"handler": context.handler_name},
            )
            translated = adapter.translate_exception(exc)
            if translated is exc:
                raise
            raise translated from exc
