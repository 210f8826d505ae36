import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_app.book import Book
from library_app.config import Settings, configure_logging, settings
from library_app.database import close_collection, get_collection
from library_app.library import Library, StorageUnavailableError
from library_app.utils.validators import InvalidIdError, ObjectIdValidator, TextValidator

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAIL = "fail"


# --- Models ---
class BookModel(BaseModel):
    id: str | None = None
    title: str
    author: str


class BookPayloadModel(BaseModel):
    """Request body for create and update; blank values are reported as missing fields."""
    title: str | None = None
    author: str | None = None


class EnvelopeModel(BaseModel):
    status: str
    message: str
    data: BookModel | list[BookModel] | None = None


# --- Helper Functions ---
def json_response(status: str, message: str, status_code: int = 200, data: Any = None,
                  headers: Optional[dict] = None) -> JSONResponse:
    """Build the {status, message, data?} envelope used by every response."""
    content: dict[str, Any] = {"status": status, "message": message}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def fail(message: str, status_code: int, headers: Optional[dict] = None) -> JSONResponse:
    return json_response(STATUS_FAIL, message, status_code, headers=headers)


def _missing_fields_response(payload: BookPayloadModel) -> Optional[JSONResponse]:
    if TextValidator.missing_fields(payload.title, payload.author):
        return fail("Missing required fields: title or author", 400)
    return None


def get_library(request: Request) -> Library:
    """Dependency returning the library created at startup."""
    return request.app.state.library


# --- Book endpoints ---
router = APIRouter()


@router.get("/books", response_model=EnvelopeModel)
def get_books(id: Optional[str] = Query(default=None), library: Library = Depends(get_library)):
    """Return all books, or a single book when the `id` query parameter is given."""
    if id is None:
        books = library.list_books()
        message = "Books retrieved successfully" if books else "No books in library"
        return json_response(STATUS_SUCCESS, message, 200, [b.to_dict() for b in books])

    if id == "":
        return fail("The 'id' parameter cannot be empty", 400)

    book_id = ObjectIdValidator.parse_id(id)
    book = library.find_book(book_id)
    if not book:
        return fail("Book not found", 404)
    return json_response(STATUS_SUCCESS, "Book retrieved successfully", 200, book.to_dict())


@router.post("/books", response_model=EnvelopeModel)
def create_book(payload: BookPayloadModel, library: Library = Depends(get_library)):
    """Add a new book; the identifier is assigned by the server."""
    invalid = _missing_fields_response(payload)
    if invalid:
        return invalid

    book = library.add_book(Book(title=payload.title, author=payload.author))
    return json_response(STATUS_SUCCESS, "Successfully created book", 200, book.to_dict())


@router.put("/books", response_model=EnvelopeModel)
def update_book(payload: BookPayloadModel, id: Optional[str] = Query(default=None),
                library: Library = Depends(get_library)):
    """Replace the title and author of the book identified by `id`."""
    if not id:
        return fail("Missing ID parameter", 400)
    book_id = ObjectIdValidator.parse_id(id)

    invalid = _missing_fields_response(payload)
    if invalid:
        return invalid

    if not library.update_book(book_id, title=payload.title, author=payload.author):
        return fail("Book not found", 404)

    book = Book(title=payload.title, author=payload.author, id=book_id)
    return json_response(STATUS_SUCCESS, "Successfully updated book", 200, book.to_dict())


@router.delete("/books", response_model=EnvelopeModel)
def delete_book(id: Optional[str] = Query(default=None), library: Library = Depends(get_library)):
    """Delete the book identified by `id`."""
    if not id:
        return fail("Missing ID parameter", 400)
    book_id = ObjectIdValidator.parse_id(id)

    if not library.remove_book(book_id):
        return fail("Book not found", 404)
    return json_response(STATUS_SUCCESS, "Successfully deleted book", 200)


# --- Error handlers ---
def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return fail("Invalid request payload", 400)

    @app.exception_handler(InvalidIdError)
    async def invalid_id_handler(request: Request, exc: InvalidIdError):
        return fail(str(exc) or "Invalid ID format", 400)

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
        return fail(str(exc) or "Storage unavailable", 500)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return fail("Method not allowed", 405, headers=exc.headers)
        return fail(str(exc.detail), exc.status_code, headers=exc.headers)


# --- Application factory ---
def create_app(library: Optional[Library] = None, config: Optional[Settings] = None) -> FastAPI:
    """Build the API application.

    When `library` is given it is used as is (tests, CLI `serve`). Otherwise
    the lifespan connects to MongoDB at startup, which is fatal on failure,
    and closes the connection on shutdown.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.library is not None:
            yield
            return
        configure_logging(config.log_level)
        collection = get_collection(config)
        app.state.library = Library(collection, operation_timeout=config.operation_timeout)
        try:
            yield
        finally:
            close_collection(collection)
            app.state.library = None

    app = FastAPI(title=config.app_name, version=config.app_version, lifespan=lifespan)
    app.state.library = library

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()
