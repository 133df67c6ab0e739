"""Shared pytest fixtures and test helpers for cglctl tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from cglctl.config.settings import CglSettings
from cglctl.infrastructure.database.engine import init_database
from cglctl.infrastructure.library import Library


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's CGLCTL_* environment out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("CGLCTL_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _clear_log_context() -> Generator[None]:
    """Drop structlog context bound by a previous CLI invocation."""
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Engine:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def library_root(tmp_path: Path) -> Path:
    """Temporary library directory.

    All library-related fixtures (library, _isolated_library) build on this.
    """
    return tmp_path


@pytest.fixture
def library(library_root: Path) -> Library:
    """Fully initialized library on a temp directory."""
    settings = CglSettings.from_cli(library_root=library_root)
    lib = Library(settings)
    try:
        yield lib
    finally:
        lib.close()


@pytest.fixture
def _isolated_library(library_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp library root so the CLI creates an isolated library.

    Use via ``@pytest.mark.usefixtures("_isolated_library")`` on command test
    classes.
    """
    monkeypatch.chdir(library_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_book(library: Library, title: str, **kwargs: Any) -> dict[str, Any]:
    """Create a book via BookService, asserting success."""
    from cglctl.services.books import BookService

    result = BookService(library).create_book(title, **kwargs)
    assert result.ok, result.error
    return result.data


def create_chapter(library: Library, book_id: str, title: str, **kwargs: Any) -> dict[str, Any]:
    """Create a chapter via BookService, asserting success."""
    from cglctl.services.books import BookService

    result = BookService(library).create_chapter(book_id, title, **kwargs)
    assert result.ok, result.error
    return result.data


def create_record(
    library: Library, book_id: str, content: str = "", **kwargs: Any
) -> dict[str, Any]:
    """Create a record via BookService, asserting success."""
    from cglctl.services.books import BookService

    result = BookService(library).create_record(book_id, content, **kwargs)
    assert result.ok, result.error
    return result.data
