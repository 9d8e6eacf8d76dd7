"""
Error model shared by every layer.

- `BaseErrors`: canonical error kinds (stable values, safe to expose to clients).
- `ErrorInfo`: immutable description of a failure (kind, message, status, cause).
- `AppException`: the one throwable that reaches HTTP clients.
- `RepositoryError`: raised by the data-access layer for store-level failures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class BaseErrors(str, Enum):
    UNHANDLED_ERROR = "unhandled_error"
    INVALID_ARGUMENTS = "invalid_arguments"
    CONNECTION_TIMEOUT = "connection_timeout"
    NOT_FOUND = "not_found"
    EMPTY_RESPONSE = "empty_response"
    FAILED_TO_CREATE_RESOURCE = "failed_to_create_resource"
    FAILED_TO_UPDATE_RESOURCE = "failed_to_update_resource"
    FAILED_TO_DELETE_RESOURCE = "failed_to_delete_resource"


@dataclass(frozen=True)
class ErrorInfo:
    """
    Classification of a failed operation.

    Attributes:
        kind: one of `BaseErrors`.
        message: optional human-friendly text.
        status_code: HTTP status that should accompany the error. `None` lets the
            exception filter fall back to 500.
        cause: the underlying exception, if any (kept for logs and payloads).
    """

    kind: BaseErrors
    message: str | None = None
    status_code: int | None = None
    cause: BaseException | None = None

    def to_payload(self) -> dict[str, Any]:
        """
        Return a JSON-serializable dict describing this error.

        Shape:
            {
                "kind": "not_found",
                "message": null,
                "status_code": 404,
                "cause": null            # str(cause) when a cause is attached
            }
        """
        return {
            "kind": self.kind.value if isinstance(self.kind, BaseErrors) else self.kind,
            "message": self.message,
            "status_code": self.status_code,
            "cause": str(self.cause) if self.cause is not None else None,
        }


class AppException(Exception):
    """
    Application exception carrying an `ErrorInfo`.

    Raised by the controller for every error-bearing envelope and rendered by the
    exception filter with `http_status()` and `to_payload()`.
    """

    def __init__(self, error_info: ErrorInfo):
        super().__init__(error_info.message or error_info.kind.value)
        self.error_info = error_info
        self.status_code = error_info.status_code

    def __str__(self) -> str:
        base = self.error_info.kind.value
        if self.error_info.message:
            base = f"{base}: {self.error_info.message}"
        if self.status_code:
            return f"{base} (status: {self.status_code})"
        return base

    def to_payload(self) -> dict[str, Any]:
        payload = self.error_info.to_payload()
        # status_code may be reassigned on the exception after construction
        payload["status_code"] = self.status_code
        return payload

    def http_status(self) -> int:
        """Status to send to the client; 500 when the error carries none."""
        return self.status_code or 500


class RepositoryError(Exception):
    """
    Store-level failure raised from repository methods.

    The service layer catches it like any other exception and maps it to the
    operation-specific error kind.
    """

    def __init__(self, message: str, *, entity_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.entity_id = entity_id


def exception_payload(exc: BaseException) -> Any:
    """
    Best-effort body for an arbitrary exception.

    - AppException: its own payload.
    - Starlette/FastAPI HTTPException (anything with `detail`): the detail as-is.
    - Anything else: an `unhandled_error` payload carrying the exception text as cause.
    """
    if isinstance(exc, AppException):
        return exc.to_payload()
    detail = getattr(exc, "detail", None)
    if detail is not None:
        return detail
    return ErrorInfo(BaseErrors.UNHANDLED_ERROR, None, 500, exc).to_payload()


__all__ = [
    "BaseErrors",
    "ErrorInfo",
    "AppException",
    "RepositoryError",
    "exception_payload",
]
