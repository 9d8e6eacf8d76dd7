from .base import (
    ExecutionContext,
    InterceptingRoute,
    Interceptor,
    get_execution_context,
    intercepted,
    run_chain,
)
from .entity_sanitizer import RULES, EntitySanitizerInterceptor, SanitizerRule, sanitize
from .exception import ExceptionInterceptor
from .logger import LoggerInterceptor
from .request_sanitizer import RequestSanitizerInterceptor

__all__ = [
    "EntitySanitizerInterceptor",
    "ExceptionInterceptor",
    "ExecutionContext",
    "InterceptingRoute",
    "Interceptor",
    "LoggerInterceptor",
    "RULES",
    "RequestSanitizerInterceptor",
    "SanitizerRule",
    "get_execution_context",
    "intercepted",
    "run_chain",
    "sanitize",
]
