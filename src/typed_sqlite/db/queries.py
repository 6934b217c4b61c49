"""SQL text builders for the four statement kinds.

Pure string functions: no engine calls. Column values are never spliced
into the text, only ``:name`` placeholders. WHERE clauses are caller
supplied raw SQL (joins, LIKE, comparisons) whose values are bound
separately.

An empty WHERE clause emits no WHERE token at all, so UPDATE and DELETE
then touch every row of the table.
"""

from collections.abc import Iterable

from typed_sqlite.models.field import NamedField


def placeholder(name: str) -> str:
    """Named parameter marker for a column: ``name`` -> ``:name``."""
    return f":{name}"


def space_if_required(clause: str) -> str:
    """A single separating space, unless the clause is empty or already starts with one."""
    return " " if clause and not clause.startswith(" ") else ""


def _names(fields: Iterable[NamedField | str]) -> list[str]:
    return [f.name if isinstance(f, NamedField) else f for f in fields]


def _append_where(sql: str, where_clause: str) -> str:
    if where_clause:
        sql += space_if_required(where_clause) + where_clause
    return sql + ";"


def build_insert(table: str, fields: Iterable[NamedField | str]) -> str:
    """Format: ``INSERT INTO T (a,b) VALUES (:a,:b);``."""
    names = _names(fields)
    columns = ",".join(names)
    values = ",".join(placeholder(name) for name in names)
    return f"INSERT INTO {table} ({columns}) VALUES ({values});"


def build_update(table: str, fields: Iterable[NamedField | str], where_clause: str = "") -> str:
    """Format: ``UPDATE T SET a=:a,b=:b WHERE ...;``."""
    assignments = ",".join(f"{name}={placeholder(name)}" for name in _names(fields))
    return _append_where(f"UPDATE {table} SET {assignments}", where_clause)


def build_delete(table: str, where_clause: str = "") -> str:
    """Format: ``DELETE FROM T WHERE ...;``."""
    return _append_where(f"DELETE FROM {table}", where_clause)


def build_select(table: str, columns: Iterable[str] = (), where_clause: str = "") -> str:
    """Format: ``SELECT a,b FROM T WHERE ...;``. No columns selects ``*``."""
    select_list = ",".join(columns) or "*"
    return _append_where(f"SELECT {select_list} FROM {table}", where_clause)
