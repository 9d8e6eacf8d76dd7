"""
Generic service layer.

`BaseService` sits between the controller and the repository. It never lets a
repository failure escape: every outcome becomes an `EntityMetadata` envelope.

| repository outcome                 | envelope                                             |
| ---------------------------------- | ---------------------------------------------------- |
| non-empty result                   | {data: result}                                       |
| None / empty collection            | {error: EMPTY_RESPONSE, 400}                         |
| exception in create/update/delete  | {error: FAILED_TO_<OP>_RESOURCE, 400, cause}         |
| exception in a read                | {error: UNHANDLED_ERROR, 400, cause}                 |
| update/delete on a missing id      | {error: NOT_FOUND, 404} (mutation never attempted)   |
| delete that removed nothing        | {error: FAILED_TO_DELETE_RESOURCE, 400}              |

Exceptions are logged once through the injected logger.
"""

import logging
from typing import Any, Generic, Mapping, TypeVar

from crudcore.database.base_repository import BaseRepository, EntityType
from crudcore.exceptions.base import BaseErrors, ErrorInfo
from crudcore.models.entity import EntityMetadata, FindModelOptions

RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)
DataType = TypeVar("DataType")

module_logger = logging.getLogger(__name__)


def _is_empty(result: Any) -> bool:
    if result is None:
        return True
    if isinstance(result, (list, tuple, dict, set, str)):
        return len(result) == 0
    return False


class BaseService(Generic[EntityType, RepositoryType]):
    def __init__(self, repository: RepositoryType, logger: logging.Logger | None = None):
        """
        Args:
            repository: the data-access object this service drives.
            logger: receives one `error` call per failed repository call.
                Defaults to this module's logger.
        """
        self.repository = repository
        self.logger = logger or module_logger

    # ------------------------
    # Mutations
    # ------------------------

    async def create(self, model: EntityType) -> EntityMetadata[EntityType]:
        try:
            result = await self.repository.create(model)
            return self.convert_to_entity_metadata(None, result)
        except Exception as error:
            self._log_failure("create", error)
            return self.get_error_entity_metadata(
                BaseErrors.FAILED_TO_CREATE_RESOURCE, None, 400, error
            )

    async def update(self, entity_id: str, model: EntityType) -> EntityMetadata[EntityType]:
        try:
            existing = await self.repository.find_by_id(entity_id)
            if not existing:
                return self.get_error_entity_metadata(BaseErrors.NOT_FOUND, None, 404)
            result = await self.repository.update(entity_id, model)
            return self.convert_to_entity_metadata(None, result)
        except Exception as error:
            self._log_failure("update", error, entity_id=entity_id)
            return self.get_error_entity_metadata(
                BaseErrors.FAILED_TO_UPDATE_RESOURCE, None, 400, error
            )

    async def delete(self, entity_id: str) -> EntityMetadata[bool]:
        try:
            existing = await self.repository.find_by_id(entity_id)
            if not existing:
                return self.get_error_entity_metadata(BaseErrors.NOT_FOUND, None, 404)

            ack = await self.repository.delete(entity_id)
            if _is_empty(ack):
                return self.get_error_entity_metadata(BaseErrors.EMPTY_RESPONSE, None, 400)
            # raw acknowledgement: {"ok": 1, "n": <removed>}
            if not ack.get("ok") or not ack.get("n"):
                return self.get_error_entity_metadata(
                    BaseErrors.FAILED_TO_DELETE_RESOURCE, None, 400
                )
            return self.get_success_entity_metadata(True)
        except Exception as error:
            self._log_failure("delete", error, entity_id=entity_id)
            return self.get_error_entity_metadata(
                BaseErrors.FAILED_TO_DELETE_RESOURCE, None, 400, error
            )

    # ------------------------
    # Reads
    # ------------------------

    async def get_all(self) -> EntityMetadata[list[EntityType]]:
        try:
            return self.convert_to_entity_metadata(None, await self.repository.get_all())
        except Exception as error:
            self._log_failure("get_all", error)
            return self.get_error_entity_metadata(BaseErrors.UNHANDLED_ERROR, None, 400, error)

    async def find_by_id(self, entity_id: str) -> EntityMetadata[EntityType]:
        try:
            return self.convert_to_entity_metadata(None, await self.repository.find_by_id(entity_id))
        except Exception as error:
            self._log_failure("find_by_id", error, entity_id=entity_id)
            return self.get_error_entity_metadata(BaseErrors.UNHANDLED_ERROR, None, 400, error)

    async def find_one(self, cond: Mapping[str, Any] | None = None) -> EntityMetadata[EntityType]:
        try:
            return self.convert_to_entity_metadata(None, await self.repository.find_one(cond))
        except Exception as error:
            self._log_failure("find_one", error)
            return self.get_error_entity_metadata(BaseErrors.UNHANDLED_ERROR, None, 400, error)

    async def find(
        self,
        cond: Mapping[str, Any] | None = None,
        options: FindModelOptions | None = None,
    ) -> EntityMetadata[list[EntityType]]:
        try:
            return self.convert_to_entity_metadata(None, await self.repository.find(cond, options))
        except Exception as error:
            self._log_failure("find", error)
            return self.get_error_entity_metadata(BaseErrors.UNHANDLED_ERROR, None, 400, error)

    # ------------------------
    # Envelope helpers
    # ------------------------

    def convert_to_entity_metadata(
        self, error: ErrorInfo | None, result: DataType | None = None
    ) -> EntityMetadata[DataType]:
        """
        Turn an (error, result) pair into an envelope.

        error present -> {error}; empty result -> EMPTY_RESPONSE; otherwise {data: result}.
        """
        if error is not None:
            return EntityMetadata(error=error)
        if _is_empty(result):
            return self.get_error_entity_metadata(BaseErrors.EMPTY_RESPONSE, None, 400)
        return self.get_success_entity_metadata(result)

    @staticmethod
    def get_success_entity_metadata(data: DataType) -> EntityMetadata[DataType]:
        return EntityMetadata(data=data)

    def get_error_entity_metadata(
        self,
        kind: BaseErrors,
        message: str | None = None,
        status_code: int = 400,
        error: BaseException | None = None,
    ) -> EntityMetadata[Any]:
        return EntityMetadata(error=ErrorInfo(kind, message, status_code, error))

    def _log_failure(self, operation: str, error: BaseException, **context: Any) -> None:
        self.logger.error(
            "service.%s.failed: %s",
            operation,
            error,
            exc_info=error,
            extra={
                "repository": type(self.repository).__name__,
                "operation": operation,
                **{key: str(value) for key, value in context.items()},
            },
        )
