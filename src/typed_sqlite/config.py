"""Environment-variable-based configuration."""

import os


def get_library_path() -> str | None:
    """Return the SQLite shared library path or name from TYPED_SQLITE_LIBRARY."""
    raw = os.environ.get("TYPED_SQLITE_LIBRARY", "").strip()
    return raw or None


def is_blob_hex_rendering() -> bool:
    """Return True if TYPED_SQLITE_BLOB_HEX is set to TRUE."""
    return os.environ.get("TYPED_SQLITE_BLOB_HEX", "").upper() == "TRUE"
