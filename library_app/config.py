import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8080"))

    # MongoDB settings
    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "library")
    mongo_collection: str = os.getenv("MONGO_COLLECTION", "books")
    connect_timeout: float = float(os.getenv("MONGO_CONNECT_TIMEOUT", "10"))
    operation_timeout: float = float(os.getenv("MONGO_OPERATION_TIMEOUT", "10"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Books API")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = _env_bool("DEBUG", "False")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Route library_app log records to stderr; a no-op once the root logger has handlers."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
