"""
MongoDB client lifecycle.

One AsyncMongoClient per process: the driver pools connections internally and
connects lazily on first use, so building the client at startup is cheap.
"""

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from crudcore.config.settings import Settings, get_settings

# Module-level reference so close_client() can find the running client
_CLIENT: AsyncMongoClient | None = None


def get_client(settings: Settings | None = None) -> AsyncMongoClient:
    global _CLIENT
    if _CLIENT is None:
        settings = settings or get_settings()
        _CLIENT = AsyncMongoClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            tz_aware=True,
        )
    return _CLIENT


def get_database(settings: Settings | None = None) -> AsyncDatabase:
    settings = settings or get_settings()
    return get_client(settings)[settings.MONGO_DB]


def get_collection(name: str, settings: Settings | None = None) -> AsyncCollection:
    """Collection handle for a repository, e.g. `BaseRepository(get_collection("users"))`."""
    return get_database(settings)[name]


async def close_client() -> None:
    """Close the client at shutdown; a later get_client() builds a new one."""
    global _CLIENT
    client = _CLIENT
    if client is None:
        return
    try:
        await client.close()
    finally:
        _CLIENT = None
