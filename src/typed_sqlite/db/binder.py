"""Bind named fields to the placeholders of a prepared statement."""

import logging
from collections.abc import Iterable
from typing import assert_never

from typed_sqlite.db.backend import Engine
from typed_sqlite.db.codes import SQLITE_OK
from typed_sqlite.db.queries import placeholder
from typed_sqlite.models.field import NamedField
from typed_sqlite.models.value import (
    BlobValue,
    CellValue,
    IntegerValue,
    NullValue,
    RealValue,
    TextValue,
)

logger = logging.getLogger(__name__)


def bind_value(engine: Engine, stmt: int, index: int, value: CellValue) -> int:
    """Bind one cell with the primitive matching its kind."""
    match value:
        case IntegerValue(value=number):
            return engine.bind_int64(stmt, index, number)
        case RealValue(value=number):
            return engine.bind_double(stmt, index, number)
        case TextValue(value=text):
            return engine.bind_text(stmt, index, text)
        case BlobValue(value=data):
            return engine.bind_blob(stmt, index, data)
        case NullValue():
            return engine.bind_null(stmt, index)
        case _:
            assert_never(value)


def bind_fields(engine: Engine, stmt: int, fields: Iterable[NamedField]) -> int:
    """Bind each field to its ``:name`` placeholder, in order.

    Stops at the first non-OK code and returns it. A name with no matching
    placeholder resolves to position 0, and the engine's own out-of-range
    error comes back unchanged.
    """
    for named in fields:
        index = engine.bind_parameter_index(stmt, placeholder(named.name))
        rc = bind_value(engine, stmt, index, named.value)
        if rc != SQLITE_OK:
            logger.debug("bind %s (position %d) failed: %d", named.name, index, rc)
            return rc
    return SQLITE_OK
