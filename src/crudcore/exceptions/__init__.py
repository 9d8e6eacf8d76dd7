from .base import (
    AppException,
    BaseErrors,
    ErrorInfo,
    RepositoryError,
    exception_payload,
)

__all__ = [
    "AppException",
    "BaseErrors",
    "ErrorInfo",
    "RepositoryError",
    "exception_payload",
]
