import os
import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorClient

from movies_api.main import create_app
from movies_api.core.config import settings
from movies_api.dependencies import get_db

# с DSN тесты идут в настоящую Mongo, без него в mongomock
TEST_MONGO_DSN = os.getenv("MONGO_TEST_DSN", "")


@pytest.fixture(scope="session", autouse=True)
def test_env():
    settings.sentry_dsn = ""  # отключаем Sentry
    settings.env = "test"
    settings.jwt_secret = "test-secret-with-enough-bytes-for-hs256"
    settings.rate_limit_max = 1000


@pytest.fixture
async def mongo_db():
    """Чистая тестовая база для каждого теста."""
    if TEST_MONGO_DSN:
        client = AsyncIOMotorClient(TEST_MONGO_DSN,
                                    serverSelectionTimeoutMS=2000)
        db = client.get_default_database("movies_test")
        for name in await db.list_collection_names():
            await db[name].delete_many({})
    else:
        client = None
        db = AsyncMongoMockClient()["movies_test"]
    yield db
    if client is not None:
        client.close()


@pytest.fixture
def app(mongo_db):
    app = create_app()

    async def test_db():
        return mongo_db

    # настоящие сервисы и репозитории, подменяется только база
    app.dependency_overrides[get_db] = test_db
    return app


@pytest.fixture
async def client(app):
    # без lifespan: ни боевой Mongo-клиент, ни JSON-логгер тут не нужны
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport,
                           base_url="http://test") as ac:
        yield ac
