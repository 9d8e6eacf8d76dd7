"""
Interceptor protocol and the route class that runs the chain.

Every controller endpoint registered through `InterceptingRoute` is wrapped so
that the interceptors registered with `register_common()` run around it, in
declared order:

    logger -> exception -> entity sanitizer -> request sanitizer -> endpoint

`Interceptor.prepare()` runs before FastAPI resolves parameters (so it may
replace the request body); `Interceptor.intercept()` wraps the endpoint call
itself and sees its return value or exception.
"""

import functools
import inspect
from abc import ABC, abstractmethod
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Sequence

from fastapi import status
from fastapi.routing import APIRoute
from starlette.requests import Request
from starlette.responses import Response

from crudcore.api.platform import HttpAdapter, create_adapter

CallNext = Callable[[], Awaitable[Any]]


@dataclass
class ExecutionContext:
    """Per-request state shared by the interceptors of one call."""

    adapter: HttpAdapter
    interceptors: Sequence["Interceptor"]
    route: APIRoute | None = None

    @property
    def handler_name(self) -> str:
        return self.route.name if self.route is not None else "<unknown>"


class Interceptor(ABC):
    async def prepare(self, context: ExecutionContext) -> None:
        """Hook that runs before the request body is parsed. No-op by default."""
        return None

    @abstractmethod
    async def intercept(self, context: ExecutionContext, call_next: CallNext) -> Any:
        """Run around the endpoint; must await `call_next()` to continue the chain."""


_execution_context: ContextVar[ExecutionContext | None] = ContextVar("execution_context", default=None)


def get_execution_context() -> ExecutionContext | None:
    return _execution_context.get()


async def run_chain(
    interceptors: Sequence[Interceptor],
    context: ExecutionContext,
    handler: CallNext,
) -> Any:
    """Call `handler` wrapped by `interceptors`, the first one outermost."""

    async def dispatch(index: int) -> Any:
        if index == len(interceptors):
            return await handler()
        return await interceptors[index].intercept(context, lambda: dispatch(index + 1))

    return await dispatch(0)


def intercepted(endpoint: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """
    Wrap `endpoint` so it runs inside the interceptor chain of the current request.

    The wrapper keeps the endpoint's signature (via `__wrapped__`) so FastAPI still
    resolves the same parameters. Already wrapped endpoints are returned unchanged:
    `include_router()` rebuilds routes from their (wrapped) endpoints.
    """
    if getattr(endpoint, "__intercepted__", False):
        return endpoint

    @functools.wraps(endpoint)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        async def handler() -> Any:
            result = endpoint(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result

        context = _execution_context.get()
        if context is None:
            return await handler()
        return await run_chain(context.interceptors, context, handler)

    wrapper.__intercepted__ = True
    return wrapper


class InterceptingRoute(APIRoute):
    """
    APIRoute that runs the application's registered interceptors.

    Usage:
        router = APIRouter(route_class=InterceptingRoute)
    """

    def __init__(self, path: str, endpoint: Callable[..., Any], **kwargs: Any):
        super().__init__(path, intercepted(endpoint), **kwargs)

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        route_handler = super().get_route_handler()
        default_status = self.status_code or status.HTTP_200_OK

        async def intercepting_route_handler(request: Request) -> Response:
            common = getattr(request.app.state, "common", None)
            if common is None:
                raise RuntimeError("register_common() must be called before serving intercepted routes")

            adapter = create_adapter(common.options.platform, request, default_status)
            context = ExecutionContext(adapter=adapter, interceptors=common.interceptors, route=self)
            for interceptor in context.interceptors:
                await interceptor.prepare(context)

            token = _execution_context.set(context)
            try:
                return await route_handler(adapter.request)
            finally:
                _execution_context.reset(token)

        return intercepting_route_handler
