"""Pytest configuration and shared fixtures.

Specialized fixtures live in:
- tests/database/conftest.py (DuckDB-specific)
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from ride_processors.config import get_config
from ride_processors.models import AnnotationPoint, Sample
from ride_processors.ride import RideFile


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point RIDE_DATA_DIR at a temporary directory for every test.

    Returns:
        Path of the (not yet created) data directory.
    """
    data_dir = tmp_path / "ride_data"
    monkeypatch.setenv("RIDE_DATA_DIR", str(data_dir))
    monkeypatch.delenv("RIDE_FIX_START_SECONDS", raising=False)
    monkeypatch.delenv("RIDE_LOG_LEVEL", raising=False)
    get_config.cache_clear()
    yield data_dir
    get_config.cache_clear()
    package_logger = logging.getLogger("ride_processors")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_ride() -> Callable[..., RideFile]:
    """Factory fixture building a RideFile from (secs, watts) pairs.

    Usage:
        def test_something(make_ride):
            ride = make_ride([(0, 0), (1, 150)], developer=[(0, "X")])
    """

    def _make(
        points: list[tuple[float, float]],
        rec_int_secs: float = 1.0,
        developer: list[tuple[float, str]] | None = None,
    ) -> RideFile:
        samples = [Sample(secs=secs, watts=watts) for secs, watts in points]
        xdata = {}
        if developer is not None:
            xdata["DEVELOPER"] = [
                AnnotationPoint(secs=secs, values={"payload": payload})
                for secs, payload in developer
            ]
        return RideFile(data_points=samples, rec_int_secs=rec_int_secs, xdata=xdata)

    return _make


@pytest.fixture
def sample_points() -> list[tuple[float, float]]:
    """Ride with a weak start, a dropout and a weak restart after a pause."""
    return [
        (0, 50),
        (1, 150),
        (2, 0),
        (3, 160),
        (20, 100),
        (21, 200),
    ]


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Return a temporary DuckDB database path.

    Returns:
        Path to a temporary test.duckdb file.
    """
    return tmp_path / "test.duckdb"
