"""End-to-end checks against a real MongoDB server.

Run with: pytest -m integration (uses MONGO_URI, default mongodb://localhost:27017).
"""

import os

import pytest
from fastapi.testclient import TestClient

from library_app.api import create_app
from library_app.database import close_collection, connect_db
from library_app.library import Library

pytestmark = pytest.mark.integration


@pytest.fixture
def live_client():
    collection = connect_db(
        os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        timeout=5,
        database_name="library_test",
        collection_name="books",
    )
    collection.delete_many({})
    try:
        yield TestClient(create_app(library=Library(collection, operation_timeout=10)))
    finally:
        collection.drop()
        close_collection(collection)


def test_crud_roundtrip(live_client):
    created = live_client.post("/books", json={"title": "Dune", "author": "Herbert"})
    assert created.status_code == 200
    book_id = created.json()["data"]["id"]

    assert live_client.get("/books", params={"id": book_id}).json()["data"]["title"] == "Dune"

    updated = live_client.put("/books", params={"id": book_id}, json={"title": "Dune", "author": "Frank Herbert"})
    assert updated.status_code == 200

    assert len(live_client.get("/books").json()["data"]) == 1
    assert live_client.delete("/books", params={"id": book_id}).status_code == 200
    assert live_client.get("/books", params={"id": book_id}).status_code == 404
