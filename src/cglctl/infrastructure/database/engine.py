"""Database engine setup for SQLite with WAL mode.

SQLite runs in WAL mode with a busy timeout, so competing writers wait
for the lock instead of failing.  The DB is stored at
``{root}/.cglctl/{filename}``.

Tables are accessed through SQLAlchemy Core; there is no ORM session
or identity map.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from cglctl.infrastructure.database.schema import metadata

logger = logging.getLogger(__name__)

DATA_DIRNAME = ".cglctl"
DEFAULT_DB_FILENAME = "cglctl.db"


def create_db_engine(db_path: Path, *, busy_timeout: float = 5.0) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"timeout": busy_timeout, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def database_path(root: Path, filename: str = DEFAULT_DB_FILENAME) -> Path:
    """Location of the database file under *root*."""
    return root / DATA_DIRNAME / filename


def init_database(
    root: Path,
    *,
    filename: str = DEFAULT_DB_FILENAME,
    busy_timeout: float = 5.0,
) -> Engine:
    """Initialize the cglctl database at ``{root}/.cglctl/{filename}``.

    Creates the ``.cglctl/`` directory and all tables from
    :data:`schema.metadata`.

    Idempotent: safe to call on an existing library.

    Returns the engine ready for use.
    """
    db_path = database_path(root, filename)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(db_path, busy_timeout=busy_timeout)
    metadata.create_all(engine)
    logger.debug("Database ready at %s", db_path)
    return engine
