"""
Base repository class providing common document-store operations.

`BaseRepository` wraps a pymongo `AsyncCollection` and translates the CRUD verbs
used by the service layer into single driver calls. Every read is lean: the
driver's plain dicts are returned as-is, never wrapped in model instances.

There are no retries and no transactions; each method is exactly one round trip.
Failures propagate to the caller (the service layer turns them into envelopes),
except `update()`, which raises `RepositoryError` itself when the store returns
no document.

Concrete repositories subclass it to add their own queries:

    class UserRepository(BaseRepository[User]):
        async def find_by_email(self, email: str) -> User | None:
            return await self.collection.find_one({"email": email})
"""

import logging
import time
from typing import Any, Generic, Mapping, TypeVar

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from crudcore.exceptions.base import RepositoryError
from crudcore.models.entity import BaseEntity, FindModelOptions

DEFAULT_LIMIT = 15
DEFAULT_SKIP = 0

# Type variable for the document shape this repository manages
EntityType = TypeVar("EntityType", bound=BaseEntity)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[EntityType]):
    """
    Generic repository over one collection.

    Type Parameters:
        EntityType: the document shape (a TypedDict extending BaseEntity).
    """

    def __init__(self, collection: AsyncCollection):
        """
        Args:
            collection: the async collection handle this repository reads and writes,
                e.g. `get_collection("users")`.
        """
        self.collection = collection

    @property
    def name(self) -> str:
        return getattr(self.collection, "name", type(self).__name__)

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, item: EntityType) -> EntityType:
        """
        Insert `item` and return it as a plain dict including the generated `_id`.

        The caller's mapping is copied first; the driver adds `_id` to the document
        it is given.
        """
        logger.debug(
            "repo.create.start",
            extra={"collection": self.name, "provided_keys": sorted(item.keys())},
        )
        start = time.perf_counter()

        document = dict(item)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id

        logger.debug(
            "repo.create.success",
            extra={
                "collection": self.name,
                "id": str(result.inserted_id),
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return document

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def get_all(self) -> list[EntityType]:
        return await self.collection.find({}).to_list(None)

    async def find_by_id(self, entity_id: str) -> EntityType | None:
        """
        Fetch one document by id, or None.

        A 24-character hex id is matched as an ObjectId; any other value is
        matched verbatim (collections with string ids).
        """
        return await self.collection.find_one({"_id": self.coerce_id(entity_id)})

    async def find_one(self, cond: Mapping[str, Any] | None = None) -> EntityType | None:
        return await self.collection.find_one(dict(cond or {}))

    async def find(
        self,
        cond: Mapping[str, Any] | None = None,
        options: FindModelOptions | None = None,
    ) -> list[EntityType]:
        """
        Paged query.

        Args:
            cond: filter document; None matches everything.
            options: limit / skip / sort. Missing or zero limit and skip fall back to
                DEFAULT_LIMIT and DEFAULT_SKIP; sort is only applied when supplied.

        Returns:
            The matching documents as plain dicts.
        """
        options = options or FindModelOptions()
        limit = options.limit or DEFAULT_LIMIT
        skip = options.skip or DEFAULT_SKIP
        sort = list(options.sort.items()) if options.sort else None

        logger.debug(
            "repo.find.start",
            extra={"collection": self.name, "limit": limit, "skip": skip, "sort": sort},
        )
        cursor = self.collection.find(dict(cond or {}), limit=limit, skip=skip, sort=sort)
        return await cursor.to_list(None)

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, entity_id: str, item: EntityType) -> EntityType:
        """
        Set the fields of `item` on the document `entity_id` and return the new version.

        Upserts when no document matches. Raises RepositoryError if the store still
        returns nothing.
        """
        changes = {key: value for key, value in dict(item).items() if key != "_id"}
        result = await self.collection.find_one_and_update(
            {"_id": self.coerce_id(entity_id)},
            {"$set": changes},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            logger.info(
                "repo.update.no_document",
                extra={"collection": self.name, "id": str(entity_id)},
            )
            raise RepositoryError(f"Failed to update entity {entity_id}", entity_id=str(entity_id))

        logger.debug("repo.update.success", extra={"collection": self.name, "id": str(entity_id)})
        return result

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, entity_id: str) -> dict[str, Any]:
        """
        Remove every document with the given id.

        Returns:
            The store's raw acknowledgement, e.g. {"n": 1, "ok": 1.0}; not a boolean.

        Raises:
            bson.errors.InvalidId: if `entity_id` is not a valid ObjectId.
        """
        result = await self.collection.delete_many({"_id": self.to_object_id(entity_id)})
        logger.debug(
            "repo.delete.done",
            extra={"collection": self.name, "id": str(entity_id), "ack": result.raw_result},
        )
        return result.raw_result

    # =================================================================================================================
    # Id helpers
    # =================================================================================================================

    @staticmethod
    def to_object_id(entity_id: str) -> ObjectId:
        return ObjectId(entity_id)

    @staticmethod
    def coerce_id(entity_id: Any) -> Any:
        if isinstance(entity_id, ObjectId):
            return entity_id
        if isinstance(entity_id, str) and ObjectId.is_valid(entity_id):
            return ObjectId(entity_id)
        return entity_id
