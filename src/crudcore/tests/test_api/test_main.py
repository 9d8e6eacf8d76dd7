from unittest.mock import AsyncMock

from starlette.testclient import TestClient

from crudcore import main
from crudcore.api.common import CommonModule
from crudcore.api.interceptors import (
    EntitySanitizerInterceptor,
    ExceptionInterceptor,
    LoggerInterceptor,
    RequestSanitizerInterceptor,
)
from crudcore.config.settings import Platform
from crudcore.core.logging.middleware import RequestIDMiddleware


def test_create_app_registers_common_module(build_test_app):
    app = build_test_app(Platform.ASGI)

    common = app.state.common
    assert isinstance(common, CommonModule)
    assert common.options.platform is Platform.ASGI
    assert [type(i) for i in common.interceptors] == [
        LoggerInterceptor,
        ExceptionInterceptor,
        EntitySanitizerInterceptor,
        RequestSanitizerInterceptor,
    ]
    assert any(m.cls is RequestIDMiddleware for m in app.user_middleware)


def test_create_app_mounts_controller_routes(build_test_app):
    app = build_test_app()

    paths = set(app.openapi()["paths"])
    assert {"/items", "/items/one", "/items/{entity_id}"} <= paths
    assert app.url_path_for("items_find_by_id", entity_id="abc") == "/items/abc"


def test_lifespan_closes_mongo_client(build_test_app, monkeypatch):
    close = AsyncMock()
    monkeypatch.setattr(main, "close_client", close)
    app = build_test_app()

    with TestClient(app) as client:
        assert client.get("/items").status_code == 200
        close.assert_not_awaited()

    close.assert_awaited_once()


def test_intercepted_routes_run_chain_once(build_test_app, controller, mock_service):
    """Routers rebuilt by include_router() must not stack the interceptors twice."""
    calls = []

    class Counter(LoggerInterceptor):
        async def intercept(self, context, call_next):
            calls.append(context.handler_name)
            return await call_next()

    app = build_test_app()
    app.state.common.interceptors = (Counter(), *app.state.common.interceptors)

    TestClient(app).get("/items")

    assert calls == ["items_find"]
