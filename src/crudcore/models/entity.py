"""
Value types passed between the repository, service and controller layers.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypedDict, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from crudcore.exceptions.base import ErrorInfo

DataType = TypeVar("DataType")

SORT_DIRECTIONS = {"asc": 1, "ascending": 1, "desc": -1, "descending": -1}


class BaseEntity(TypedDict, total=False):
    """Marker shape merged into every lean document read from the store."""

    _id: ObjectId | str


@dataclass(frozen=True)
class EntityMetadata(Generic[DataType]):
    """
    Envelope returned by every service operation.

    Exactly one of `data` / `error` is populated by the service. An envelope with
    neither is treated as an empty response by the controller.
    """

    data: DataType | None = None
    error: ErrorInfo | None = None


class FindModelOptions(BaseModel):
    """Paging and ordering for repository `find` calls."""

    model_config = ConfigDict(frozen=True)

    # None or 0 falls back to the repository defaults
    limit: int | None = Field(default=15, ge=0)
    skip: int | None = Field(default=0, ge=0)
    # field name -> direction (1 ascending, -1 descending)
    sort: dict[str, int] | None = None

    @field_validator("sort", mode="before")
    @classmethod
    def normalize_sort(cls, value: Any) -> Any:
        """Accept named directions ("asc", "descending", ...) alongside 1 and -1."""
        if not isinstance(value, dict):
            return value
        return {
            field: SORT_DIRECTIONS.get(direction.lower(), direction) if isinstance(direction, str) else direction
            for field, direction in value.items()
        }


class QueryParams(FindModelOptions):
    """
    Decoded form of the controller's JSON `query` string.

    Example:
        {"filter": {"name": "foobar"}, "limit": 10, "skip": 0, "sort": {"name": -1}}
    """

    filter: dict[str, Any]

    def to_options(self) -> FindModelOptions:
        return FindModelOptions(limit=self.limit, skip=self.skip, sort=self.sort)
