"""Locate and describe the SQLite C library for ctypes.

Search order:
1. TYPED_SQLITE_LIBRARY environment variable
2. ``ctypes.util.find_library("sqlite3")``
3. Well-known shared object names for the platform
4. Symbols already loaded into this process
5. The stdlib ``_sqlite3`` extension module, for interpreters that link
   SQLite statically into it
"""

import ctypes
import ctypes.util
import logging
import sys
from functools import cache

from typed_sqlite.config import get_library_path

logger = logging.getLogger(__name__)

c_db_p = ctypes.c_void_p
c_stmt_p = ctypes.c_void_p

# Destructor sentinel for sqlite3_bind_text/blob: the caller keeps the buffer alive
SQLITE_STATIC = ctypes.c_void_p(0)


class EngineUnavailableError(RuntimeError):
    """The SQLite shared library could not be found or is incomplete."""


def _candidates() -> list[str | None]:
    """Library names and paths to try, in priority order."""
    names: list[str | None] = []
    configured = get_library_path()
    if configured:
        names.append(configured)
    found = ctypes.util.find_library("sqlite3")
    if found:
        names.append(found)
    if sys.platform == "darwin":
        names.append("libsqlite3.dylib")
    elif sys.platform == "win32":
        names.append("sqlite3.dll")
    else:
        names.extend(["libsqlite3.so.0", "libsqlite3.so"])
    # None means "the running process" to dlopen
    names.append(None)
    try:
        import _sqlite3

        module_file = getattr(_sqlite3, "__file__", None)
        if module_file:
            names.append(module_file)
    except ImportError:
        logger.debug("_sqlite3 extension module not available")
    return names


def _declare(lib: ctypes.CDLL) -> None:
    """Set up function signatures for the subset of the C API in use."""
    c_int = ctypes.c_int
    c_char_p = ctypes.c_char_p

    lib.sqlite3_open.argtypes = [c_char_p, ctypes.POINTER(c_db_p)]
    lib.sqlite3_open.restype = c_int
    lib.sqlite3_close.argtypes = [c_db_p]
    lib.sqlite3_close.restype = c_int

    lib.sqlite3_prepare_v2.argtypes = [
        c_db_p,
        c_char_p,
        c_int,
        ctypes.POINTER(c_stmt_p),
        ctypes.POINTER(c_char_p),
    ]
    lib.sqlite3_prepare_v2.restype = c_int
    lib.sqlite3_finalize.argtypes = [c_stmt_p]
    lib.sqlite3_finalize.restype = c_int
    lib.sqlite3_step.argtypes = [c_stmt_p]
    lib.sqlite3_step.restype = c_int

    lib.sqlite3_bind_parameter_index.argtypes = [c_stmt_p, c_char_p]
    lib.sqlite3_bind_parameter_index.restype = c_int
    lib.sqlite3_bind_int64.argtypes = [c_stmt_p, c_int, ctypes.c_int64]
    lib.sqlite3_bind_int64.restype = c_int
    lib.sqlite3_bind_double.argtypes = [c_stmt_p, c_int, ctypes.c_double]
    lib.sqlite3_bind_double.restype = c_int
    lib.sqlite3_bind_text.argtypes = [c_stmt_p, c_int, c_char_p, c_int, ctypes.c_void_p]
    lib.sqlite3_bind_text.restype = c_int
    lib.sqlite3_bind_blob.argtypes = [c_stmt_p, c_int, c_char_p, c_int, ctypes.c_void_p]
    lib.sqlite3_bind_blob.restype = c_int
    lib.sqlite3_bind_null.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_bind_null.restype = c_int

    lib.sqlite3_column_count.argtypes = [c_stmt_p]
    lib.sqlite3_column_count.restype = c_int
    lib.sqlite3_column_name.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_name.restype = c_char_p
    lib.sqlite3_column_type.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_type.restype = c_int
    lib.sqlite3_column_int64.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_int64.restype = ctypes.c_int64
    lib.sqlite3_column_double.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_double.restype = ctypes.c_double
    # Raw pointers: these buffers may hold NUL bytes and are copied with string_at
    lib.sqlite3_column_text.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_text.restype = ctypes.c_void_p
    lib.sqlite3_column_blob.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_blob.restype = ctypes.c_void_p
    lib.sqlite3_column_bytes.argtypes = [c_stmt_p, c_int]
    lib.sqlite3_column_bytes.restype = c_int

    lib.sqlite3_last_insert_rowid.argtypes = [c_db_p]
    lib.sqlite3_last_insert_rowid.restype = ctypes.c_int64
    lib.sqlite3_errmsg.argtypes = [c_db_p]
    lib.sqlite3_errmsg.restype = c_char_p
    lib.sqlite3_errstr.argtypes = [c_int]
    lib.sqlite3_errstr.restype = c_char_p


@cache
def load_library() -> ctypes.CDLL:
    """Load the SQLite library once per process and declare its signatures."""
    tried: list[str] = []
    for name in _candidates():
        label = name or "<process>"
        tried.append(label)
        try:
            lib = ctypes.CDLL(name)
        except (OSError, TypeError) as exc:
            logger.debug("Cannot load %s: %s", label, exc)
            continue
        try:
            _declare(lib)
        except AttributeError:
            logger.debug("%s loaded but does not export the SQLite C API", label)
            continue
        logger.debug("Using SQLite library %s", label)
        return lib
    raise EngineUnavailableError(
        f"Could not load the SQLite C library. Tried: {', '.join(tried)}. "
        "Set TYPED_SQLITE_LIBRARY to the library path."
    )
