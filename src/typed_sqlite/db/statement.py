"""Scoped prepared statements: finalize runs exactly once on every path."""

from __future__ import annotations

import logging
from types import TracebackType

from typed_sqlite.db.backend import Engine
from typed_sqlite.db.codes import SQLITE_DONE, SQLITE_ERROR, SQLITE_OK, SQLITE_ROW

logger = logging.getLogger(__name__)


class PreparedStatement:
    """A compiled statement owned by one ``with`` block.

    ``__exit__`` finalizes whether the block returns normally, returns
    early on an error code, or raises. Calling ``finalize()`` inside the
    block captures the finalize code; the exit is then a no-op.
    """

    def __init__(self, engine: Engine, handle: int) -> None:
        """Initialize with the engine that compiled ``handle``."""
        self._engine = engine
        self._handle: int | None = handle

    def __enter__(self) -> PreparedStatement:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.finalize()

    @property
    def handle(self) -> int:
        """The native statement handle."""
        if self._handle is None:
            raise RuntimeError("Statement already finalized")
        return self._handle

    @property
    def finalized(self) -> bool:
        """True once the native statement has been released."""
        return self._handle is None

    def finalize(self) -> int:
        """Release the statement. Later calls return SQLITE_OK and do nothing."""
        if self._handle is None:
            return SQLITE_OK
        handle, self._handle = self._handle, None
        rc = self._engine.finalize(handle)
        if rc != SQLITE_OK:
            logger.debug("finalize returned %d", rc)
        return rc

    def complete(self, rc: int) -> int:
        """Finalize after the last step and choose the code to report.

        A step that completed (OK, ROW or DONE) reports the finalize code;
        a failed step keeps its own code, which says more than finalize's.
        """
        finalize_rc = self.finalize()
        return finalize_rc if rc in (SQLITE_OK, SQLITE_ROW, SQLITE_DONE) else rc

    def run(self) -> int:
        """Step once for a statement that returns no rows, then finalize.

        A row produced by a DML statement (e.g. RETURNING) is ignored.
        """
        return self.complete(self._engine.step(self.handle))


def prepare(engine: Engine, db: int, sql: str) -> tuple[int, PreparedStatement | None]:
    """Compile ``sql``. Returns (status, statement); statement is None on failure."""
    rc, handle = engine.prepare(db, sql)
    if rc != SQLITE_OK:
        logger.debug("prepare failed (%d): %s", rc, sql)
        return rc, None
    if handle is None:
        # Whitespace or comment only: nothing to run
        logger.debug("prepare produced no statement: %r", sql)
        return SQLITE_ERROR, None
    logger.debug("Prepared: %s", sql)
    return rc, PreparedStatement(engine, handle)
