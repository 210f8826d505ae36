import logging
from typing import Optional

import typer
import uvicorn
from rich.console import Console

from library_app.api import create_app
from library_app.config import configure_logging, settings
from library_app.database import close_collection, get_collection
from library_app.library import Library, StorageUnavailableError
from library_app.utils.ui_helpers import print_list_result, set_output_mode

APP_NAME = "Library CLI"

console = Console()
logger = logging.getLogger("library_app")

app = typer.Typer(help=APP_NAME)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: LOG_LEVEL)"),
):
    """Global CLI options (output mode, logging)."""
    configure_logging(log_level)
    if output:
        set_output_mode(output)


@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, help="Host to bind"),
    port: int = typer.Option(settings.api_port, help="Port to bind"),
):
    """Connect to MongoDB and start the API server."""
    logger.info("Starting database connection...")
    collection = get_collection(settings)
    logger.info("Database connected successfully.")

    api = create_app(library=Library(collection, operation_timeout=settings.operation_timeout))
    console.print(f"[bold green]Starting API on http://{host}:{port}/books[/]")
    try:
        uvicorn.run(api, host=host, port=port, log_level=settings.log_level.lower())
    finally:
        close_collection(collection)


@app.command("ping")
def cli_ping():
    """Check that MongoDB is reachable."""
    collection = get_collection(settings)
    close_collection(collection)
    print(f"MongoDB is reachable ({settings.mongo_db}.{settings.mongo_collection}).")


@app.command("list")
def cli_list():
    """List all books."""
    collection = get_collection(settings)
    try:
        books = Library(collection, operation_timeout=settings.operation_timeout).list_books()
    except StorageUnavailableError as e:
        console.print(f"[bold red]{e}[/]")
        raise typer.Exit(code=1)
    finally:
        close_collection(collection)
    print_list_result(books)


if __name__ == "__main__":
    app()
