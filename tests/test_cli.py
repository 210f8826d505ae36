from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from library_app.book import Book
from library_app.library import Library
from library_app.main import app

runner = CliRunner()


@pytest.fixture
def cli_collection(monkeypatch, collection):
    monkeypatch.setattr("library_app.main.get_collection", MagicMock(return_value=collection))
    monkeypatch.setattr("library_app.main.close_collection", MagicMock())
    monkeypatch.delenv("LIB_CLI_OUTPUT", raising=False)
    return collection


def test_list_no_books(cli_collection):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout


def test_list_books_plain(cli_collection):
    book = Library(cli_collection).add_book(Book("Dune", "Herbert"))
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert f"{book.id} - Dune by Herbert" in result.stdout


def test_list_books_json(cli_collection):
    book = Library(cli_collection).add_book(Book("Dune", "Herbert"))
    result = runner.invoke(app, ["--output", "json", "list"])
    assert result.exit_code == 0
    assert f'"id": "{book.id}"' in result.stdout


def test_ping(cli_collection):
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 0
    assert "MongoDB is reachable" in result.stdout


def test_ping_failure_exits(monkeypatch):
    monkeypatch.setattr("library_app.main.get_collection", MagicMock(side_effect=SystemExit(1)))
    result = runner.invoke(app, ["ping"])
    assert result.exit_code == 1


@patch("library_app.main.uvicorn.run")
def test_serve_command(mock_run, cli_collection):
    result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "9000"])
    assert result.exit_code == 0
    assert "Starting API on" in result.stdout
    mock_run.assert_called_once()
    api = mock_run.call_args[0][0]
    assert api.state.library.collection is cli_collection
    assert mock_run.call_args[1]["host"] == "0.0.0.0"
    assert mock_run.call_args[1]["port"] == 9000


def test_list_books_rich(cli_collection):
    Library(cli_collection).add_book(Book("Dune", "Herbert"))
    result = runner.invoke(app, ["--output", "rich", "list"])
    assert result.exit_code == 0
    assert "Library (1 books)" in result.stdout
    assert "Dune" in result.stdout
