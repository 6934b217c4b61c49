"""Typed statement building, binding and row decoding over SQLite."""

from typed_sqlite.db.backend import Engine
from typed_sqlite.db.connection import Connection
from typed_sqlite.db.native import EngineUnavailableError
from typed_sqlite.db.sqlite_backend import SQLiteEngine
from typed_sqlite.db.statement import PreparedStatement

__all__ = ["Connection", "Engine", "EngineUnavailableError", "PreparedStatement", "SQLiteEngine"]
