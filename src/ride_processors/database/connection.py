"""DuckDB access for the ride database.

The processors run from a single CLI process, so connections are opened
per operation and closed straight after; there is no pooling or lock
handling.

Usage:
    from ride_processors.database.connection import open_db, transaction

    with open_db(db_path) as conn, transaction(conn):
        conn.execute("DELETE FROM ride_samples WHERE activity_id = ?", [42])
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import duckdb

logger = logging.getLogger(__name__)


def get_db_path(db_path: str | Path | None = None) -> Path:
    """Return db_path as a Path, or the default ride database path.

    The default is looked up on every call so a changed RIDE_DATA_DIR
    takes effect without clearing any cache.
    """
    if db_path is not None:
        return Path(db_path)

    from ride_processors.utils.paths import get_default_db_path

    return Path(get_default_db_path())


@contextmanager
def open_db(
    db_path: str | Path | None = None,
    *,
    read_only: bool = False,
) -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Open the ride database for the duration of the block.

    Read-write opens create the database (and its directory) on demand;
    read-only opens require it to exist.

    Raises:
        FileNotFoundError: If read_only and the database file is missing.
    """
    path = get_db_path(db_path)
    if read_only:
        if not path.exists():
            raise FileNotFoundError(f"Ride database not found: {path}")
    else:
        path.parent.mkdir(parents=True, exist_ok=True)

    conn = duckdb.connect(str(path), read_only=read_only)
    logger.debug(f"Opened {path} ({'read-only' if read_only else 'read-write'})")
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: duckdb.DuckDBPyConnection) -> Generator[None, None, None]:
    """Commit the block's statements together, or roll all of them back."""
    conn.execute("BEGIN TRANSACTION")
    try:
        yield
    except Exception:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
