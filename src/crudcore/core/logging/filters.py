# src/crudcore/core/logging/filters.py
"""
Logging filters.

- RequestIdFilter: stamps every LogRecord with the id of the HTTP request that
  produced it. The id lives in a `contextvars.ContextVar`, so it follows the
  request across `await` points and concurrent tasks keep their own value.
- RedactFilter: masks record attributes whose name looks like a secret
  (e.g. `extra={"password": ...}`).

Both filters return True: they annotate records, they never drop them.
"""

import contextvars
import logging
from logging import LogRecord

# Request id of the current execution context; None when no request is active.
_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def set_request_id(request_id: str | None):
    """
    Set the request id for the current context.

    Returns:
        The contextvar token; pass it to `reset_request_id()` to restore the previous value.
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Guarantee a `request_id` attribute on every record.

    Precedence: an explicit `extra={"request_id": ...}`, then the contextvar set by
    RequestIDMiddleware, then the sentinel "-" (keeps `%(request_id)s` formats safe).
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    SENSITIVE = {
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
        "mongo_uri",
    }
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
