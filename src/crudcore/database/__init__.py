"""
Data-access layer.

Usage:
    from crudcore.database import BaseRepository, get_collection

    class ItemRepository(BaseRepository[Item]):
        pass

    repository = ItemRepository(get_collection("items"))
"""

from .base_repository import DEFAULT_LIMIT, DEFAULT_SKIP, BaseRepository
from .client import close_client, get_client, get_collection, get_database

__all__ = [
    "BaseRepository",
    "DEFAULT_LIMIT",
    "DEFAULT_SKIP",
    "close_client",
    "get_client",
    "get_collection",
    "get_database",
]
