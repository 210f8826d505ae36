import json
import os
from typing import Callable, Dict, Iterable, List

from rich.console import Console
from rich.table import Table

from library_app.book import Book

# LIB_CLI_OUTPUT selects how book lists are printed: plain (default), json or rich
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
DEFAULT_MODE = "plain"
EMPTY_MESSAGE = "No books in library."
COLUMNS = ("id", "title", "author")

_console = Console()


def _render_plain(rows: List[dict]) -> None:
    for row in rows:
        print(f"{row.get('id', '-')} - {row['title']} by {row['author']}")


def _render_json(rows: List[dict]) -> None:
    print(json.dumps(rows, ensure_ascii=False))


def _render_rich(rows: List[dict]) -> None:
    table = Table(title=f"Library ({len(rows)} books)", header_style="bold")
    for column in COLUMNS:
        table.add_column(column.capitalize(), no_wrap=column == "id")
    for row in rows:
        table.add_row(*(str(row.get(column, "")) for column in COLUMNS))
    _console.print(table)


RENDERERS: Dict[str, Callable[[List[dict]], None]] = {
    "plain": _render_plain,
    "json": _render_json,
    "rich": _render_rich,
}


def set_output_mode(mode: str) -> None:
    """Remember the output mode for this process; unknown modes are ignored."""
    mode = (mode or "").lower().strip()
    if mode in RENDERERS:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, DEFAULT_MODE).lower()
    return mode if mode in RENDERERS else DEFAULT_MODE


def print_list_result(books: Iterable[Book]) -> None:
    rows = [book.to_dict() for book in books]
    if not rows:
        print(EMPTY_MESSAGE)
        return
    RENDERERS[get_output_mode()](rows)
