"""Dialect-aware ``INSERT ... ON CONFLICT`` construction.

PostgreSQL (production) and SQLite (tests) both support
``on_conflict_do_update``, but through dialect-specific ``insert``
constructs. Callers build the upsert once and let the database resolve
concurrent writers.
"""

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_insert(db: Session, table: Table):
    """Return an ``insert(table)`` that supports ``on_conflict_do_update``."""
    dialect = db.get_bind().dialect.name
    try:
        return _INSERTS[dialect](table)
    except KeyError:
        raise NotImplementedError(f"Upserts are not supported on {dialect!r}") from None
