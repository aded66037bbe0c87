"""Path configuration utilities for ride processing.

Data locations can be moved out of the repository via environment
variables, so recorded rides never have to live next to the code.
"""

import os
from functools import lru_cache
from pathlib import Path

DEFAULT_DB_NAME = "rides.duckdb"


@lru_cache(maxsize=1)
def get_project_root() -> Path:
    """Find the repository root by searching upward for .git directory.

    Returns:
        Path: The repository root directory
    """
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / ".git").exists():
            return parent
    # Fallback: src/ride_processors/utils/paths.py -> repo root
    return Path(__file__).resolve().parent.parent.parent.parent


def get_data_base_dir() -> Path:
    """Get the base data directory from environment or default.

    Returns:
        Path: Base data directory (default: project_root/data)

    Environment:
        RIDE_DATA_DIR: Override default data directory path
    """
    env_path = os.getenv("RIDE_DATA_DIR")
    if env_path:
        return Path(env_path).resolve()
    return get_project_root() / "data"


def get_database_dir() -> Path:
    """Get the database directory."""
    return get_data_base_dir() / "database"


def get_default_db_path() -> str:
    """Get the default DuckDB database file path.

    Returns:
        str: Default database path (database_dir/rides.duckdb)
    """
    return str(get_database_dir() / DEFAULT_DB_NAME)
