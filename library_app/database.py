import logging
import sys
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from library_app.config import Settings, settings

logger = logging.getLogger(__name__)


def connect_db(
    uri: str,
    timeout: float = 10.0,
    database_name: str = "library",
    collection_name: str = "books",
) -> Collection:
    """Connect to MongoDB, verify the server with a ping and return the books collection.

    This is a one-shot bootstrap: any failure while connecting or pinging
    terminates the process. The returned handle is meant to be created once at
    startup and shared by every request.
    """
    timeout_ms = int(timeout * 1000)

    logger.info("Attempting to connect to MongoDB...")
    try:
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
        )
    except PyMongoError as e:
        logger.critical("Failed to connect to MongoDB: %s", e)
        sys.exit(1)

    logger.info("Pinging MongoDB server...")
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        logger.critical("Failed to ping MongoDB server: %s", e)
        client.close()
        sys.exit(1)
    logger.info("Successfully connected and pinged MongoDB server.")

    collection = client[database_name][collection_name]
    logger.info("Book collection initialized: %s.%s", database_name, collection_name)
    return collection


def get_collection(config: Optional[Settings] = None) -> Collection:
    """Connect using the values from the application settings."""
    config = config or settings
    return connect_db(
        config.mongo_uri,
        timeout=config.connect_timeout,
        database_name=config.mongo_db,
        collection_name=config.mongo_collection,
    )


def close_collection(collection: Collection) -> None:
    """Close the client that owns the collection handle."""
    collection.database.client.close()
    logger.info("MongoDB connection closed.")
