import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from catalog.db.mongodb import get_db, get_gateway
from catalog.main import app
from catalog.services.catalog_service import CatalogService


class StaticGateway:
    """Stands in for MongoGateway: hands out an already-open database."""

    def __init__(self, db=None, error=None):
        self.db = db
        self.error = error

    async def get_db(self):
        if self.error is not None:
            raise self.error
        return self.db


@pytest.fixture
def db():
    return AsyncMongoMockClient()["library"]


@pytest.fixture
def service(db):
    return CatalogService(db)


@pytest.fixture
def api(db):
    async def _db():
        return db

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_gateway] = lambda: StaticGateway(db)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def http(api):
    # no context manager: the lifespan (real Mongo warm-up) is not run
    return TestClient(api)
