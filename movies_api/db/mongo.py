import logging

from bson import ObjectId

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from movies_api.core.config import settings

logger = logging.getLogger(__name__)

MOVIES = "movies"
RATINGS = "ratings"
ACTORS = "actors"

_client: AsyncIOMotorClient | None = None


def create_client(dsn: str) -> AsyncIOMotorClient:
    """Motor-клиент с явными таймаутами и пулом."""
    return AsyncIOMotorClient(
        dsn,
        appname="movies-api",
        tz_aware=True,
        maxPoolSize=50,
        minPoolSize=0,
        serverSelectionTimeoutMS=3000,
        connectTimeoutMS=3000,
        socketTimeoutMS=5000,
        retryWrites=True,
    )


async def get_client() -> AsyncIOMotorClient:
    """
    Singleton-клиент; при первом создании пингуем сервер,
    но не падаем, если он пока недоступен.
    """
    global _client
    if _client is None:
        _client = create_client(settings.mongo_dsn)
        try:
            await _client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("mongo_ping_failed", extra={"err": str(e)})
    return _client


async def get_mongo_db() -> AsyncIOMotorDatabase:
    client = await get_client()
    return client[settings.mongo_db]


async def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def to_object_id(value: str) -> ObjectId | None:
    """ObjectId из строки или None, если строка не похожа на id."""
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)
