# src/crudcore/core/logging/middleware.py
"""
Request ID middleware for FastAPI / Starlette.

Each request gets an id, taken from the incoming `X-Request-ID` header when it is
a short printable token, otherwise a fresh UUID4. The id is stored in the
request-id contextvar for the duration of the request (so RequestIdFilter can
stamp log records) and echoed back in the `X-Request-ID` response header.

Register it before routers that log:
    app.add_middleware(RequestIDMiddleware)
"""

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from .filters import reset_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

# no whitespace/control characters, bounded length (log injection)
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.fullmatch(incoming):
        return incoming
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            reset_request_id(token)
