"""Engine protocol: the primitive capability the veneer is built on.

Application code never calls these directly; the binder, materializer and
connection facade compose them. Each engine (the native SQLite library,
test fakes, ...) provides a concrete implementation. Handles are opaque
integers and every status is the engine's raw result code.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Engine(Protocol):
    """Prepare/bind/step/finalize primitives of an embedded SQL engine."""

    def open(self, path: str) -> tuple[int, int | None]:
        """Open a database. Returns (status, handle); handle is None on failure."""
        ...

    def close(self, db: int) -> int:
        """Close a database handle."""
        ...

    def prepare(self, db: int, sql: str) -> tuple[int, int | None]:
        """Compile one SQL statement. Returns (status, statement handle)."""
        ...

    def bind_parameter_index(self, stmt: int, name: str) -> int:
        """Return the 1-based position of a named parameter, or 0 if absent."""
        ...

    def bind_int64(self, stmt: int, index: int, value: int) -> int:
        """Bind a 64-bit integer."""
        ...

    def bind_double(self, stmt: int, index: int, value: float) -> int:
        """Bind a double."""
        ...

    def bind_text(self, stmt: int, index: int, value: str) -> int:
        """Bind UTF-8 text without copying; the buffer must outlive the step."""
        ...

    def bind_blob(self, stmt: int, index: int, value: bytes) -> int:
        """Bind a byte sequence of explicit length without copying."""
        ...

    def bind_null(self, stmt: int, index: int) -> int:
        """Bind SQL NULL."""
        ...

    def step(self, stmt: int) -> int:
        """Advance the statement. Returns SQLITE_ROW, SQLITE_DONE or an error."""
        ...

    def finalize(self, stmt: int) -> int:
        """Release a statement handle."""
        ...

    def column_count(self, stmt: int) -> int:
        """Number of columns in the result."""
        ...

    def column_name(self, stmt: int, index: int) -> str:
        """Name of a result column."""
        ...

    def column_type(self, stmt: int, index: int) -> int:
        """Fundamental datatype code of a column in the current row."""
        ...

    def column_int64(self, stmt: int, index: int) -> int:
        """Integer value of a column in the current row."""
        ...

    def column_double(self, stmt: int, index: int) -> float:
        """Double value of a column in the current row."""
        ...

    def column_text(self, stmt: int, index: int) -> str:
        """Owned copy of a text column in the current row.

        Raises UnicodeDecodeError when the stored bytes are not valid UTF-8.
        """
        ...

    def column_blob(self, stmt: int, index: int) -> bytes:
        """Owned copy of a blob column in the current row."""
        ...

    def last_insert_rowid(self, db: int) -> int:
        """Rowid of the most recent successful INSERT on this handle."""
        ...

    def errmsg(self, db: int) -> str:
        """English text for the most recent failure on this handle."""
        ...

    def errstr(self, rc: int) -> str:
        """English text for a result code."""
        ...
