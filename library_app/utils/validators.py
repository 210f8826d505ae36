from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId


class InvalidIdError(ValueError):
    """Raised when an identifier is not a 24 character hex ObjectId."""


class ObjectIdValidator:
    """Parsing of the hex identifiers exposed by the API."""

    @staticmethod
    def parse_id(raw: Optional[str]) -> ObjectId:
        # Exact 24 hex characters; surrounding whitespace is not tolerated
        if raw is None or not isinstance(raw, str):
            raise InvalidIdError("Invalid ID format")
        try:
            return ObjectId(raw)
        except (InvalidId, TypeError):
            raise InvalidIdError("Invalid ID format")


class TextValidator:
    """Required field checks for book payloads."""

    @staticmethod
    def is_non_empty(text: Optional[str]) -> bool:
        return text is not None and bool(text.strip())

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return TextValidator.is_non_empty(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        return TextValidator.is_non_empty(author)

    @staticmethod
    def missing_fields(title: Optional[str], author: Optional[str]) -> list[str]:
        """Names of the required fields that are absent or blank, in order."""
        missing = []
        if not TextValidator.validate_title(title):
            missing.append("title")
        if not TextValidator.validate_author(author):
            missing.append("author")
        return missing
