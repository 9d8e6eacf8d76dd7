"""
Application factory.

Usage:
    from crudcore.main import create_app

    app = create_app(controllers=[("/items", ItemController(item_service))])

    # uvicorn module:app
"""

import logging
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI

from crudcore.api.base_controller import BaseController
from crudcore.api.common import register_common
from crudcore.config.settings import Settings, get_settings
from crudcore.core.logging import RequestIDMiddleware, setup_logging
from crudcore.database.client import close_client
from crudcore.utils.logging import get_project_name, get_project_version

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app.startup", extra={"platform": app.state.common.options.platform.value})
    try:
        yield
    finally:
        await close_client()
        logger.info("app.shutdown")


def create_app(
    settings: Settings | None = None,
    controllers: Iterable[tuple[str, BaseController]] = (),
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: defaults to `get_settings()`.
        controllers: (prefix, controller) pairs; each controller's router is
            mounted at its prefix and tagged with it.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title=get_project_name(), version=get_project_version(), lifespan=lifespan)
    app.add_middleware(RequestIDMiddleware)
    register_common(app, settings.common_options())

    for prefix, controller in controllers:
        app.include_router(controller.build_router(prefix, tags=[prefix.strip("/") or "root"]))
        logger.debug("app.router.mounted", extra={"prefix": prefix, "controller": type(controller).__name__})

    return app
