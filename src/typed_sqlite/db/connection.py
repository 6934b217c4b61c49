"""Connection facade: one native handle and the five typed operations.

Every operation follows the same pipeline: check the connection is open,
build the SQL text, prepare, bind, step (draining rows for SELECT), and
finalize. The first non-OK code short-circuits the remaining stages, but
a prepared statement is always finalized. Codes are SQLite's own and
are returned unchanged; nothing here raises on an engine failure, so
callers must check every status and read ``last_error_description()``
for the details.

A connection is not safe for concurrent use; callers serialize access.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from types import TracebackType

from typed_sqlite.db.backend import Engine
from typed_sqlite.db.binder import bind_fields
from typed_sqlite.db.codes import SQLITE_MISUSE, SQLITE_OK
from typed_sqlite.db.materializer import fetch_rows
from typed_sqlite.db.queries import build_delete, build_insert, build_select, build_update
from typed_sqlite.db.sqlite_backend import SQLiteEngine
from typed_sqlite.db.statement import prepare
from typed_sqlite.models.field import NamedField, Row

logger = logging.getLogger(__name__)


class Connection:
    """A single SQLite database connection.

    States: unopened -> open -> closed. Operations other than ``open``
    return SQLITE_MISUSE while not open. ``close`` is idempotent, and the
    connection closes itself on ``with`` exit or when garbage-collected.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        """Initialize unopened, on the native SQLite engine unless one is given."""
        self._engine: Engine = engine if engine is not None else SQLiteEngine()
        self._db: int | None = None

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_db", None) is not None:
            logger.warning("Connection garbage-collected while open; closing it")
            self.close()

    @property
    def is_open(self) -> bool:
        """True between a successful ``open`` and ``close``."""
        return self._db is not None

    # -- Lifecycle --

    def open(self, path: str | os.PathLike[str]) -> int:
        """Open (or create) a database file and return the engine's status.

        Opening a connection that is already open returns SQLITE_MISUSE and
        leaves the live handle alone.
        """
        if self._db is not None:
            logger.debug("open(%s) on a connection that is already open", path)
            return SQLITE_MISUSE
        rc, handle = self._engine.open(os.fspath(path))
        if rc == SQLITE_OK:
            self._db = handle
            logger.debug("Opened %s", path)
        return rc

    def close(self) -> int:
        """Close the connection. Closing one that is not open returns SQLITE_OK."""
        if self._db is None:
            return SQLITE_OK
        rc = self._engine.close(self._db)
        if rc == SQLITE_OK:
            self._db = None
            logger.debug("Closed connection")
        else:
            logger.debug("close failed: %d", rc)
        return rc

    def last_insert_rowid(self) -> int:
        """Rowid of the latest successful INSERT on this connection, 0 if none."""
        if self._db is None:
            return 0
        return self._engine.last_insert_rowid(self._db)

    def last_error_description(self) -> str:
        """Engine text for the latest failure on this connection, "" if not open."""
        if self._db is None:
            return ""
        return self._engine.errmsg(self._db)

    def error_string(self, rc: int) -> str:
        """Engine text for any result code; usable without an open database."""
        return self._engine.errstr(rc)

    # -- Operations --

    def insert_into(self, table: str, fields: Iterable[NamedField]) -> int:
        """INSERT one row built from ``fields``."""
        if self._db is None:
            return self._not_open("insert_into")
        fields = list(fields)
        return self._execute(self._db, build_insert(table, fields), fields)

    def update(
        self,
        table: str,
        fields: Iterable[NamedField],
        where_clause: str = "",
        where_bindings: Iterable[NamedField] = (),
    ) -> int:
        """UPDATE rows matching ``where_clause`` with ``fields``.

        Without a WHERE clause every row in the table is updated. SET
        fields and WHERE bindings share one placeholder namespace, so
        their names must not collide.
        """
        if self._db is None:
            return self._not_open("update")
        fields = list(fields)
        sql = build_update(table, fields, where_clause)
        return self._execute(self._db, sql, fields, list(where_bindings))

    def delete_from(
        self,
        table: str,
        where_clause: str = "",
        where_bindings: Iterable[NamedField] = (),
    ) -> int:
        """DELETE rows matching ``where_clause``; without one, empty the table."""
        if self._db is None:
            return self._not_open("delete_from")
        return self._execute(self._db, build_delete(table, where_clause), list(where_bindings))

    def select_columns(
        self,
        table: str,
        columns: Iterable[str],
        where_clause: str = "",
        where_bindings: Iterable[NamedField] = (),
    ) -> tuple[int, list[Row]]:
        """SELECT ``columns`` (all columns when empty). Returns (status, rows).

        Rows keep select-list order and duplicate names; use
        ``rows_to_mappings`` for name-keyed rows. On a failed step the rows
        read before the failure are still returned.
        """
        if self._db is None:
            return self._not_open("select_columns"), []
        sql = build_select(table, columns, where_clause)
        return self._query(self._db, sql, list(where_bindings))

    def select_star(
        self,
        table: str,
        where_clause: str = "",
        where_bindings: Iterable[NamedField] = (),
    ) -> tuple[int, list[Row]]:
        """SELECT * from ``table``; without a WHERE clause, the whole table."""
        if self._db is None:
            return self._not_open("select_star"), []
        sql = build_select(table, (), where_clause)
        return self._query(self._db, sql, list(where_bindings))

    # -- Pipeline --

    def _not_open(self, operation: str) -> int:
        logger.debug("%s on a connection that is not open", operation)
        return SQLITE_MISUSE

    def _execute(self, db: int, sql: str, *bindings: list[NamedField]) -> int:
        """Prepare, bind each field list in turn, step once, finalize."""
        rc, stmt = prepare(self._engine, db, sql)
        if stmt is None:
            return rc
        with stmt:
            for fields in bindings:
                rc = bind_fields(self._engine, stmt.handle, fields)
                if rc != SQLITE_OK:
                    return rc
            return stmt.run()

    def _query(
        self, db: int, sql: str, bindings: list[NamedField]
    ) -> tuple[int, list[Row]]:
        """Prepare, bind, drain every row, finalize."""
        rc, stmt = prepare(self._engine, db, sql)
        if stmt is None:
            return rc, []
        with stmt:
            rc = bind_fields(self._engine, stmt.handle, bindings)
            if rc != SQLITE_OK:
                return rc, []
            rc, rows = fetch_rows(self._engine, stmt.handle)
            return stmt.complete(rc), rows
