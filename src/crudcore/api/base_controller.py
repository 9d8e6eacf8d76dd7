"""
Generic HTTP binding over a `BaseService`.

`BaseController` parses the JSON `query` string, calls the service and unwraps
the envelope: data comes back as `{"data": ...}`, errors are raised as
`AppException` for the exception filter to render.

Usage:
    class ItemController(BaseController[Item, ItemRepository, ItemService]):
        pass

    app.include_router(ItemController(service).build_router("/items", tags=["items"]))

Routes built by `build_router(prefix)`:

| method | path                    | operation                         |
| ------ | ----------------------- | --------------------------------- |
| GET    | {prefix}?query=         | find(query)                       |
| GET    | {prefix}/one?query=     | find_one(query)                   |
| GET    | {prefix}/{entity_id}    | find_by_id(entity_id)             |
| POST   | {prefix}                | create(body)            -> 201    |
| PUT    | {prefix}/{entity_id}    | update(body, entity_id)           |
| DELETE | {prefix}/{entity_id}    | delete(entity_id)                 |

`query` is a JSON document: {"filter": {...}, "limit": 10, "skip": 0, "sort": {"name": 1}}.
Sort directions may also be given as "asc"/"desc".
"""

import logging
from typing import Any, Generic, NoReturn, TypeVar

from fastapi import APIRouter, Body, Path, Query, status
from pydantic import ValidationError

from crudcore.api.interceptors.base import InterceptingRoute
from crudcore.database.base_repository import BaseRepository, EntityType
from crudcore.exceptions.base import AppException, BaseErrors, ErrorInfo
from crudcore.models.entity import EntityMetadata, QueryParams
from crudcore.services.base_service import BaseService

RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)
ServiceType = TypeVar("ServiceType", bound=BaseService)

logger = logging.getLogger(__name__)


class BaseController(Generic[EntityType, RepositoryType, ServiceType]):
    def __init__(self, service: ServiceType):
        self.service = service

    # ------------------------
    # Operations
    # ------------------------

    async def find(self, query_string: str | None = None) -> dict[str, Any]:
        if not query_string:
            response = await self.service.find(None, None)
        else:
            params = self.parse_query(query_string)
            response = await self.service.find(params.filter, params.to_options())
        return self.handle_response(response)

    async def find_by_id(self, entity_id: str) -> dict[str, Any]:
        return self.handle_response(await self.service.find_by_id(entity_id))

    async def find_one(self, query_string: str | None) -> dict[str, Any]:
        params = self.parse_query(query_string)
        return self.handle_response(await self.service.find_one(params.filter))

    async def create(self, model: EntityType | None) -> dict[str, Any]:
        if model is None:
            self.send_error_response(
                ErrorInfo(BaseErrors.INVALID_ARGUMENTS, "Request body is required", status.HTTP_400_BAD_REQUEST)
            )
        return self.handle_response(await self.service.create(model))

    async def update(self, model: EntityType, entity_id: str) -> dict[str, Any]:
        return self.handle_response(await self.service.update(entity_id, model))

    async def delete(self, entity_id: str) -> dict[str, Any]:
        return self.handle_response(await self.service.delete(entity_id))

    # ------------------------
    # Helpers
    # ------------------------

    @staticmethod
    def parse_query(query_string: str | None) -> QueryParams:
        """
        Decode the JSON `query` string.

        Raises:
            AppException(INVALID_ARGUMENTS, 400): missing string, invalid JSON, no
                `filter` key, or ill-typed paging values.
        """
        if not query_string:
            BaseController.send_error_response(
                ErrorInfo(BaseErrors.INVALID_ARGUMENTS, "A JSON query is required", status.HTTP_400_BAD_REQUEST)
            )
        try:
            return QueryParams.model_validate_json(query_string)
        except ValidationError as exc:
            logger.debug("controller.query.invalid", extra={"query": query_string, "errors": exc.error_count()})
            raise AppException(
                ErrorInfo(BaseErrors.INVALID_ARGUMENTS, "Malformed query", status.HTTP_400_BAD_REQUEST, exc)
            ) from exc

    @staticmethod
    def handle_response(response: EntityMetadata[Any] | None) -> dict[str, Any]:
        if response is None or (response.data is None and response.error is None):
            BaseController.send_error_response(
                ErrorInfo(BaseErrors.EMPTY_RESPONSE, None, status.HTTP_400_BAD_REQUEST)
            )
        if response.error is not None:
            BaseController.send_error_response(response.error)
        return {"data": response.data}

    @staticmethod
    def send_error_response(error: ErrorInfo) -> NoReturn:
        raise AppException(error)

    # ------------------------
    # Routing
    # ------------------------

    def build_router(self, prefix: str, tags: list[str] | None = None) -> APIRouter:
        """
        Bind the operations to a router whose routes run the registered interceptors.

        `register_common(app, ...)` must have been called on the application the
        router is included in.
        """
        controller = self
        resource = prefix.strip("/").replace("/", "_") or type(self).__name__.lower()
        router = APIRouter(prefix=prefix, tags=tags, route_class=InterceptingRoute)

        async def find(query: str | None = Query(None, description="JSON encoded {filter, limit, skip, sort}")):
            return await controller.find(query)

        async def find_one(query: str | None = Query(None, description="JSON encoded {filter}")):
            return await controller.find_one(query)

        async def find_by_id(entity_id: str = Path(...)):
            return await controller.find_by_id(entity_id)

        async def create(model: dict[str, Any] | None = Body(None)):
            return await controller.create(model)

        async def update(entity_id: str = Path(...), model: dict[str, Any] = Body(...)):
            return await controller.update(model, entity_id)

        async def delete(entity_id: str = Path(...)):
            return await controller.delete(entity_id)

        # "/one" must be registered before "/{entity_id}"
        router.add_api_route("", find, methods=["GET"], name=f"{resource}_find", response_model=None)
        router.add_api_route("/one", find_one, methods=["GET"], name=f"{resource}_find_one", response_model=None)
        router.add_api_route(
            "/{entity_id}", find_by_id, methods=["GET"], name=f"{resource}_find_by_id", response_model=None
        )
        router.add_api_route(
            "",
            create,
            methods=["POST"],
            name=f"{resource}_create",
            status_code=status.HTTP_201_CREATED,
            response_model=None,
        )
        router.add_api_route(
            "/{entity_id}", update, methods=["PUT"], name=f"{resource}_update", response_model=None
        )
        router.add_api_route(
            "/{entity_id}", delete, methods=["DELETE"], name=f"{resource}_delete", response_model=None
        )
        return router
