"""
One-call registration of the cross-cutting HTTP behaviour.

Usage:
    app = FastAPI()
    register_common(app, CommonConfigOptions(platform=Platform.STARLETTE))
    app.include_router(ItemController(service).build_router("/items"))

`register_common` stores a `CommonModule` on `app.state.common` (read by
`InterceptingRoute` on every request) and installs `AppExceptionFilter` as the
exception handler for `AppException`, `HTTPException` and `Exception`.
"""

import logging
from typing import Sequence

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from crudcore.api.filters.app_exception_filter import AppExceptionFilter
from crudcore.api.interceptors import (
    EntitySanitizerInterceptor,
    ExceptionInterceptor,
    Interceptor,
    LoggerInterceptor,
    RequestSanitizerInterceptor,
)
from crudcore.config.settings import CommonConfigOptions
from crudcore.exceptions.base import AppException


class CommonModule:
    """
    Immutable options plus the interceptor chain and filter built from them.

    Args:
        options: platform selection, shared read-only by every request.
        logger: used by the logger/exception interceptors and the filter.
        interceptors: overrides the default chain (logger, exception, entity
            sanitizer, request sanitizer).
    """

    def __init__(
        self,
        options: CommonConfigOptions,
        logger: logging.Logger | None = None,
        interceptors: Sequence[Interceptor] | None = None,
    ):
        self.options = options
        self.logger = logger or logging.getLogger("crudcore.api")
        if interceptors is None:
            interceptors = self.default_interceptors(self.logger)
        self.interceptors: tuple[Interceptor, ...] = tuple(interceptors)
        self.exception_filter = AppExceptionFilter(options, self.logger)

    @staticmethod
    def default_interceptors(logger: logging.Logger) -> list[Interceptor]:
        return [
            LoggerInterceptor(logger),
            ExceptionInterceptor(logger),
            EntitySanitizerInterceptor(),
            RequestSanitizerInterceptor(),
        ]


def register_common(
    app: FastAPI,
    options: CommonConfigOptions | None = None,
    *,
    logger: logging.Logger | None = None,
    interceptors: Sequence[Interceptor] | None = None,
) -> CommonModule:
    module = CommonModule(options or CommonConfigOptions(), logger, interceptors)
    app.state.common = module

    # Most specific first
    app.add_exception_handler(AppException, module.exception_filter.catch)
    app.add_exception_handler(StarletteHTTPException, module.exception_filter.catch)
    app.add_exception_handler(Exception, module.exception_filter.catch)
    return module
