"""Database test fixtures."""

from pathlib import Path

import pytest

from ride_processors.database.ride_store import save_ride
from ride_processors.ride import RideFile


@pytest.fixture
def stored_ride(make_ride, sample_points, temp_db_path: Path) -> tuple[int, Path]:
    """Save the sample ride (with DEVELOPER annotations) to a temp database.

    Returns:
        Tuple of (activity_id, db_path).
    """
    activity_id = 12345678901
    ride: RideFile = make_ride(
        sample_points,
        developer=[(0, "warmup"), (2, "dropout"), (3, "steady"), (20, "restart")],
    )
    ride.set_tag("Sport", "Bike")
    save_ride(activity_id, ride, temp_db_path)
    return activity_id, temp_db_path
