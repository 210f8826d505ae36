import logging
from typing import List, Optional

import pymongo
from bson import ObjectId
from bson.errors import BSONError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from library_app.book import Book
from library_app.config import settings

logger = logging.getLogger(__name__)


class StorageUnavailableError(Exception):
    """The database operation failed or did not finish within the time limit."""


class Library:
    """Manages the book collection stored in MongoDB.

    The collection handle is created once at startup and injected here; it is
    shared by all requests and never replaced.
    """

    def __init__(self, collection: Collection, operation_timeout: Optional[float] = None) -> None:
        self.collection = collection
        self.operation_timeout = operation_timeout if operation_timeout is not None else settings.operation_timeout

    # ------------------------- Core operations ------------------------- #
    def list_books(self) -> List[Book]:
        try:
            with pymongo.timeout(self.operation_timeout):
                docs = list(self.collection.find({}))
        except PyMongoError as e:
            logger.error("Failed to retrieve books: %s", e)
            raise StorageUnavailableError("Failed to retrieve books") from e
        try:
            return [Book.from_dict(doc) for doc in docs]
        except BSONError as e:
            logger.error("Error decoding books: %s", e)
            raise StorageUnavailableError("Error decoding books") from e

    def find_book(self, book_id: ObjectId) -> Optional[Book]:
        try:
            with pymongo.timeout(self.operation_timeout):
                doc = self.collection.find_one({"_id": book_id})
        except PyMongoError as e:
            logger.error("Failed to retrieve book %s: %s", book_id, e)
            raise StorageUnavailableError("Failed to retrieve book") from e
        if not doc:
            return None
        try:
            return Book.from_dict(doc)
        except BSONError as e:
            logger.error("Error decoding book %s: %s", book_id, e)
            raise StorageUnavailableError("Error decoding book") from e

    def add_book(self, book: Book) -> Book:
        """Insert a new book; a fresh identifier is always assigned."""
        book.id = ObjectId()
        try:
            with pymongo.timeout(self.operation_timeout):
                self.collection.insert_one(book.to_document())
        except PyMongoError as e:
            logger.error("Failed to create book: %s", e)
            raise StorageUnavailableError("Failed to create book") from e
        logger.info("Book created: %s", book.id)
        return book

    def update_book(self, book_id: ObjectId, *, title: str, author: str) -> bool:
        """Replace title and author. Returns False when no book has this id."""
        try:
            with pymongo.timeout(self.operation_timeout):
                result = self.collection.update_one(
                    {"_id": book_id},
                    {"$set": {"title": title.strip(), "author": author.strip()}},
                )
        except PyMongoError as e:
            logger.error("Failed to update book %s: %s", book_id, e)
            raise StorageUnavailableError("Failed to update book") from e
        return result.matched_count > 0

    def remove_book(self, book_id: ObjectId) -> bool:
        try:
            with pymongo.timeout(self.operation_timeout):
                result = self.collection.delete_one({"_id": book_id})
        except PyMongoError as e:
            logger.error("Failed to delete book %s: %s", book_id, e)
            raise StorageUnavailableError("Failed to delete book") from e
        return result.deleted_count > 0

    def count_books(self) -> int:
        try:
            with pymongo.timeout(self.operation_timeout):
                return self.collection.count_documents({})
        except PyMongoError as e:
            logger.error("Failed to count books: %s", e)
            raise StorageUnavailableError("Failed to count books") from e
