"""SQLite implementation of the Engine protocol.

Thin wrapper around the SQLite C library loaded through ctypes. Every
method is one C call plus the Python/C conversions it needs.
"""

from __future__ import annotations

import ctypes
import logging
import os

from typed_sqlite.db.codes import SQLITE_OK
from typed_sqlite.db.native import SQLITE_STATIC, c_db_p, c_stmt_p, load_library

logger = logging.getLogger(__name__)


def _decode(raw: bytes | None) -> str:
    return raw.decode("utf-8", errors="replace") if raw else ""


class SQLiteEngine:
    """SQLite implementation of the Engine protocol.

    Handles are raw pointer values. Text and blob parameters are bound
    with SQLITE_STATIC, so the encoded buffers are pinned against their
    statement here and only released by ``finalize``.
    """

    def __init__(self, lib: ctypes.CDLL | None = None) -> None:
        """Initialize with a loaded library, or locate one."""
        self._lib = lib if lib is not None else load_library()
        self._pinned: dict[int, list[bytes]] = {}

    # -- Connection --

    def open(self, path: str | os.PathLike[str]) -> tuple[int, int | None]:
        """Open a database file. Returns (status, handle)."""
        handle = c_db_p()
        rc = self._lib.sqlite3_open(os.fspath(path).encode("utf-8"), ctypes.byref(handle))
        if rc != SQLITE_OK:
            # sqlite3_open hands back a handle even on failure; it still needs closing
            logger.debug(
                "sqlite3_open(%s) failed: %s", path, _decode(self._lib.sqlite3_errmsg(handle))
            )
            if handle.value:
                self._lib.sqlite3_close(handle)
            return rc, None
        return rc, handle.value

    def close(self, db: int) -> int:
        """Close a database handle."""
        return self._lib.sqlite3_close(db)

    def last_insert_rowid(self, db: int) -> int:
        """Rowid of the most recent successful INSERT on this handle."""
        return self._lib.sqlite3_last_insert_rowid(db)

    def errmsg(self, db: int) -> str:
        """English text for the most recent failure on this handle."""
        return _decode(self._lib.sqlite3_errmsg(db))

    def errstr(self, rc: int) -> str:
        """English text for a result code."""
        return _decode(self._lib.sqlite3_errstr(rc))

    # -- Statements --

    def prepare(self, db: int, sql: str) -> tuple[int, int | None]:
        """Compile the first statement in ``sql``. Returns (status, statement)."""
        stmt = c_stmt_p()
        encoded = sql.encode("utf-8")
        rc = self._lib.sqlite3_prepare_v2(db, encoded, len(encoded), ctypes.byref(stmt), None)
        return rc, stmt.value

    def step(self, stmt: int) -> int:
        """Advance the statement."""
        return self._lib.sqlite3_step(stmt)

    def finalize(self, stmt: int) -> int:
        """Release a statement and any buffers pinned for it."""
        rc = self._lib.sqlite3_finalize(stmt)
        self._pinned.pop(stmt, None)
        return rc

    # -- Binding --

    def bind_parameter_index(self, stmt: int, name: str) -> int:
        """Return the 1-based position of a named parameter, or 0 if absent."""
        return self._lib.sqlite3_bind_parameter_index(stmt, name.encode("utf-8"))

    def bind_int64(self, stmt: int, index: int, value: int) -> int:
        """Bind a 64-bit integer."""
        return self._lib.sqlite3_bind_int64(stmt, index, value)

    def bind_double(self, stmt: int, index: int, value: float) -> int:
        """Bind a double."""
        return self._lib.sqlite3_bind_double(stmt, index, value)

    def bind_text(self, stmt: int, index: int, value: str) -> int:
        """Bind UTF-8 text without copying."""
        data = self._pin(stmt, value.encode("utf-8"))
        return self._lib.sqlite3_bind_text(stmt, index, data, len(data), SQLITE_STATIC)

    def bind_blob(self, stmt: int, index: int, value: bytes) -> int:
        """Bind a byte sequence without copying.

        An empty ``bytes`` still has a non-NULL buffer, so it binds a
        zero-length blob rather than NULL.
        """
        data = self._pin(stmt, bytes(value))
        return self._lib.sqlite3_bind_blob(stmt, index, data, len(data), SQLITE_STATIC)

    def bind_null(self, stmt: int, index: int) -> int:
        """Bind SQL NULL."""
        return self._lib.sqlite3_bind_null(stmt, index)

    def _pin(self, stmt: int, data: bytes) -> bytes:
        """Keep ``data`` alive until ``stmt`` is finalized."""
        self._pinned.setdefault(stmt, []).append(data)
        return data

    # -- Columns --

    def column_count(self, stmt: int) -> int:
        """Number of columns in the result."""
        return self._lib.sqlite3_column_count(stmt)

    def column_name(self, stmt: int, index: int) -> str:
        """Name of a result column."""
        return _decode(self._lib.sqlite3_column_name(stmt, index))

    def column_type(self, stmt: int, index: int) -> int:
        """Fundamental datatype code of a column in the current row."""
        return self._lib.sqlite3_column_type(stmt, index)

    def column_int64(self, stmt: int, index: int) -> int:
        """Integer value of a column in the current row."""
        return self._lib.sqlite3_column_int64(stmt, index)

    def column_double(self, stmt: int, index: int) -> float:
        """Double value of a column in the current row."""
        return self._lib.sqlite3_column_double(stmt, index)

    def column_text(self, stmt: int, index: int) -> str:
        """Copy a text column out of the engine's buffer, decoding strictly."""
        # Pointer first, then length: the order SQLite documents for conversions
        ptr = self._lib.sqlite3_column_text(stmt, index)
        size = self._lib.sqlite3_column_bytes(stmt, index)
        return ctypes.string_at(ptr, size).decode("utf-8") if ptr else ""

    def column_blob(self, stmt: int, index: int) -> bytes:
        """Copy a blob column out of the engine's buffer."""
        ptr = self._lib.sqlite3_column_blob(stmt, index)
        size = self._lib.sqlite3_column_bytes(stmt, index)
        return ctypes.string_at(ptr, size) if ptr else b""
