import mongomock
import pytest
from fastapi.testclient import TestClient

from library_app.api import create_app
from library_app.library import Library


@pytest.fixture
def collection():
    # Fresh in-memory MongoDB for every test
    mongo = mongomock.MongoClient()
    yield mongo["library"]["books"]
    mongo.close()


@pytest.fixture
def lib(collection):
    return Library(collection, operation_timeout=10)


@pytest.fixture
def client(lib):
    return TestClient(create_app(library=lib))
