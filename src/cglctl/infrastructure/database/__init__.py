"""SQLite database engine, schema, number reservation, and range filters."""

from cglctl.infrastructure.database.counters import (
    NumberConflictError,
    claim_scope,
    reserve_visible_number,
    scope_key,
)
from cglctl.infrastructure.database.engine import create_db_engine, init_database
from cglctl.infrastructure.database.filters import visible_range_clause
from cglctl.infrastructure.database.schema import (
    author_notes,
    books,
    chapters,
    doc_inserts,
    metadata,
    number_counters,
    records,
)

__all__ = [
    "NumberConflictError",
    "author_notes",
    "claim_scope",
    "books",
    "chapters",
    "create_db_engine",
    "doc_inserts",
    "init_database",
    "metadata",
    "number_counters",
    "records",
    "reserve_visible_number",
    "scope_key",
    "visible_range_clause",
]
