"""
Global exception filter.

Registered by `register_common()` for `AppException`, Starlette's `HTTPException`
and any other `Exception`:

    status = exc.status_code or 500
    body   = exception_payload(exc)

The response object is produced by the platform adapter, so both platforms send
the same JSON body.

Example body for an AppException(NOT_FOUND, 404):
    {"kind": "not_found", "message": null, "status_code": 404, "cause": null}
"""

import logging

from starlette.requests import Request
from starlette.responses import Response

from crudcore.api.platform import create_adapter
from crudcore.config.settings import CommonConfigOptions
from crudcore.exceptions.base import exception_payload


class AppExceptionFilter:
    def __init__(self, options: CommonConfigOptions | None = None, logger: logging.Logger | None = None):
        self.options = options or CommonConfigOptions()
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def resolve_status(exc: Exception) -> int:
        return getattr(exc, "status_code", None) or 500

    async def catch(self, request: Request, exc: Exception) -> Response:
        status_code = self.resolve_status(exc)

        if status_code >= 500:
            self.logger.error(
                "%s for %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc
            )
        else:
            self.logger.info(
                "%s for %s %s: %s", type(exc).__name__, request.method, request.url.path, exc
            )

        adapter = create_adapter(self.options.platform, request, status_code)
        response = adapter.send(exception_payload(exc))

        headers = getattr(exc, "headers", None)
        if headers:
            response.headers.update(headers)
        return response
