"""Drain a stepped SELECT into owned rows of named cells."""

import logging
from typing import assert_never

from typed_sqlite.db import codes
from typed_sqlite.db.backend import Engine
from typed_sqlite.models.field import NamedField, Row
from typed_sqlite.models.value import (
    BlobValue,
    CellValue,
    IntegerValue,
    NullValue,
    RealValue,
    TextValue,
    ValueKind,
)

logger = logging.getLogger(__name__)

_KINDS = {
    codes.SQLITE_INTEGER: ValueKind.INTEGER,
    codes.SQLITE_FLOAT: ValueKind.REAL,
    codes.SQLITE_TEXT: ValueKind.TEXT,
    codes.SQLITE_BLOB: ValueKind.BLOB,
    codes.SQLITE_NULL: ValueKind.NULL,
}


def column_names(engine: Engine, stmt: int) -> list[str]:
    """Result column names, read once from the prepared statement."""
    return [engine.column_name(stmt, i) for i in range(engine.column_count(stmt))]


def column_kind(type_code: int) -> ValueKind | None:
    """Map an engine datatype code to a cell kind, or None if unknown."""
    return _KINDS.get(type_code)


def read_cell(engine: Engine, stmt: int, index: int) -> CellValue | None:
    """Decode one column of the current row, or None for an unknown type code.

    Text and blob are copied out immediately: the engine reuses those
    buffers on the next step and frees them on finalize. Text that is not
    valid UTF-8 comes back as a blob of its exact bytes.
    """
    kind = column_kind(engine.column_type(stmt, index))
    if kind is None:
        return None
    match kind:
        case ValueKind.INTEGER:
            return IntegerValue(value=engine.column_int64(stmt, index))
        case ValueKind.REAL:
            return RealValue(value=engine.column_double(stmt, index))
        case ValueKind.TEXT:
            try:
                return TextValue(value=engine.column_text(stmt, index))
            except UnicodeDecodeError:
                logger.debug("column %d is not valid UTF-8; reading it as a blob", index)
                return BlobValue(value=engine.column_blob(stmt, index))
        case ValueKind.BLOB:
            return BlobValue(value=engine.column_blob(stmt, index))
        case ValueKind.NULL:
            return NullValue()
        case _:
            assert_never(kind)


def read_row(engine: Engine, stmt: int, names: list[str]) -> Row | None:
    """Decode every column of the current row, in select-list order."""
    row: Row = []
    for index, name in enumerate(names):
        value = read_cell(engine, stmt, index)
        if value is None:
            logger.debug("column %s has unknown type code", name)
            return None
        row.append(NamedField(name=name, value=value))
    return row


def fetch_rows(engine: Engine, stmt: int) -> tuple[int, list[Row]]:
    """Step until the statement is done, collecting each row.

    Returns (SQLITE_OK, rows) when the engine reports DONE. Any other step
    code stops the loop and is returned with the rows read so far. The
    caller finalizes the statement.
    """
    names = column_names(engine, stmt)
    rows: list[Row] = []
    while True:
        rc = engine.step(stmt)
        if rc == codes.SQLITE_DONE:
            return codes.SQLITE_OK, rows
        if rc != codes.SQLITE_ROW:
            logger.debug("step failed after %d rows: %d", len(rows), rc)
            return rc, rows
        row = read_row(engine, stmt, names)
        if row is None:
            return codes.SQLITE_MISMATCH, rows
        rows.append(row)
