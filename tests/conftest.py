"""Shared test fixtures."""

import sqlite3

import pytest

from typed_sqlite.db.codes import (
    SQLITE_DONE,
    SQLITE_MISUSE,
    SQLITE_OK,
    SQLITE_RANGE,
    SQLITE_ROW,
)
from typed_sqlite.db.connection import Connection

SCHEMA_SQL = """
DROP TABLE IF EXISTS contacts;
CREATE TABLE contacts (name TEXT, company TEXT, mobile TEXT, ddi TEXT, switchboard TEXT,
    address1 TEXT, address2 TEXT, address3 TEXT, address4 TEXT, postcode TEXT, email TEXT,
    url TEXT, category TEXT, notes TEXT);
CREATE INDEX idx_mobile ON contacts (mobile);
CREATE INDEX idx_switchboard ON contacts (switchboard);
CREATE INDEX idx_ddi ON contacts (ddi);
CREATE TABLE calls (timestamp DATETIME DEFAULT CURRENT_TIMESTAMP, callerid TEXT,
    contactid INTEGER);
CREATE TABLE people (name TEXT UNIQUE, age INTEGER, height REAL, photo BLOB);
INSERT INTO contacts (name, mobile, switchboard, address1, address2, address3, postcode,
    email, url, category)
    VALUES ('Test Person', '07788111222', '02088884444', 'House of Commons', 'Westminster',
    'London', 'SW1A 0AA', 'test@house.co.uk', 'www.house.com', 'Supplier');
INSERT INTO calls (callerid, contactid) VALUES ('07788111222', 1);
"""


@pytest.fixture
def db_path(tmp_path):
    """Seeded contacts database, created without the code under test."""
    path = tmp_path / "contacts.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def db(db_path):
    """Open connection to the seeded contacts database."""
    conn = Connection()
    assert conn.open(db_path) == SQLITE_OK
    yield conn
    conn.close()


class FakeEngine:
    """Scriptable stand-in for the SQLite engine.

    ``params`` are the placeholders the prepared statement exposes, ``rows``
    a list of rows of (type code, value) pairs returned one per step, and
    ``final_step`` the code returned once the rows run out.
    """

    STMT = 7

    def __init__(
        self,
        *,
        params=(),
        columns=(),
        rows=(),
        final_step=SQLITE_DONE,
        prepare_rc=SQLITE_OK,
        finalize_rc=SQLITE_OK,
        close_rc=SQLITE_OK,
    ):
        self.params = list(params)
        self.columns = list(columns)
        self.rows = [list(row) for row in rows]
        self.final_step = final_step
        self.prepare_rc = prepare_rc
        self.finalize_rc = finalize_rc
        self.close_rc = close_rc
        self.calls: list[tuple] = []
        self.finalized: list[int] = []
        self.prepared: list[str] = []
        self._cursor = -1

    def open(self, path):
        self.calls.append(("open", path))
        return SQLITE_OK, 1

    def close(self, db):
        self.calls.append(("close", db))
        return self.close_rc

    def prepare(self, db, sql):
        self.prepared.append(sql)
        if self.prepare_rc != SQLITE_OK:
            return self.prepare_rc, None
        return SQLITE_OK, self.STMT

    def bind_parameter_index(self, stmt, name):
        self.calls.append(("index", name))
        return self.params.index(name) + 1 if name in self.params else 0

    def _bind(self, kind, index, value=None):
        self.calls.append((kind, index, value))
        if index < 1 or index > len(self.params):
            return SQLITE_RANGE
        return SQLITE_OK

    def bind_int64(self, stmt, index, value):
        return self._bind("int64", index, value)

    def bind_double(self, stmt, index, value):
        return self._bind("double", index, value)

    def bind_text(self, stmt, index, value):
        return self._bind("text", index, value)

    def bind_blob(self, stmt, index, value):
        return self._bind("blob", index, value)

    def bind_null(self, stmt, index):
        return self._bind("null", index)

    def step(self, stmt):
        if stmt in self.finalized:
            return SQLITE_MISUSE
        self.calls.append(("step",))
        self._cursor += 1
        if self._cursor < len(self.rows):
            return SQLITE_ROW
        return self.final_step

    def finalize(self, stmt):
        self.finalized.append(stmt)
        return self.finalize_rc

    def column_count(self, stmt):
        return len(self.columns)

    def column_name(self, stmt, index):
        self.calls.append(("column_name", index))
        return self.columns[index]

    def column_type(self, stmt, index):
        return self.rows[self._cursor][index][0]

    def _column_value(self, index):
        return self.rows[self._cursor][index][1]

    def column_int64(self, stmt, index):
        return self._column_value(index)

    def column_double(self, stmt, index):
        return self._column_value(index)

    def column_text(self, stmt, index):
        return self._column_value(index)

    def column_blob(self, stmt, index):
        return self._column_value(index)

    def last_insert_rowid(self, db):
        return 0

    def errmsg(self, db):
        return "fake error"

    def errstr(self, rc):
        return f"code {rc}"


@pytest.fixture
def fake_engine():
    """Factory for scripted fake engines."""
    return FakeEngine
