from .app_exception_filter import AppExceptionFilter

__all__ = ["AppExceptionFilter"]
