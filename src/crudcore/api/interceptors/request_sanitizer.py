import json
import logging
from typing import Any

from .base import CallNext, ExecutionContext, Interceptor

logger = logging.getLogger(__name__)


class RequestSanitizerInterceptor(Interceptor):
    """
    Makes JSON sent without a JSON content type reach the endpoint as parsed JSON.

    For POST requests the platform adapter reports as unparsed (see
    `HttpAdapter.needs_body_parsing`), the raw body is read and, when it is valid
    JSON, replayed to FastAPI as `application/json`. Multipart bodies are never
    touched. Bodies that are not JSON are left for FastAPI's own validation.
    """

    async def prepare(self, context: ExecutionContext) -> None:
        adapter = context.adapter
        if not adapter.needs_body_parsing():
            return

        raw = await adapter.read_body()
        try:
            text = raw.decode("utf-8").strip()
            if not text:
                return
            json.loads(text)
        except ValueError as exc:
            logger.debug(
                "request_sanitizer.skip_non_json",
                extra={"url": adapter.url, "content_type": adapter.content_type, "reason": str(exc)},
            )
            return

        adapter.replace_body(text.encode("utf-8"))
        logger.debug("request_sanitizer.body_replayed", extra={"url": adapter.url, "bytes": len(raw)})

    async def intercept(self, context: ExecutionContext, call_next: CallNext) -> Any:
        return await call_next()
