"""Async engine construction

SQLite has no row locks and the pysqlite driver defers BEGIN until the first
write, so two sessions can both read a free slot and a full balance before
either writes. On SQLite every transaction therefore starts with
BEGIN IMMEDIATE, which takes the database write lock up front; concurrent
units of work queue on it (up to the driver's busy timeout) instead of
interleaving. PostgreSQL keeps its own transaction handling and relies on
row locks plus the per-trainer advisory lock.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine


def serialize_sqlite_writes(engine: AsyncEngine) -> AsyncEngine:
    """Make every SQLite transaction a BEGIN IMMEDIATE write transaction."""
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself instead of the driver's lazy one
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine

