"""
RideStore - persist rides (samples, xdata series, tags) in DuckDB

Rides are written with DELETE-then-INSERT per activity so a processed
ride can be saved back over its unprocessed version.
"""

import json
import logging
from pathlib import Path
from typing import Any

import duckdb

from ride_processors.database.connection import get_db_path, open_db, transaction
from ride_processors.models import AnnotationPoint, Sample
from ride_processors.ride import RideFile

logger = logging.getLogger(__name__)

_SAMPLE_COLUMNS = ["secs", "watts", "hr", "cad", "km", "kph", "alt"]


def ensure_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create ride tables if they don't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS rides (
            activity_id BIGINT PRIMARY KEY,
            rec_int_secs DOUBLE NOT NULL
        )
        """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS ride_samples (
            activity_id BIGINT NOT NULL,
            seq_no INTEGER NOT NULL,
            secs DOUBLE NOT NULL,
            watts DOUBLE,
            hr DOUBLE,
            cad DOUBLE,
            km DOUBLE,
            kph DOUBLE,
            alt DOUBLE,
            PRIMARY KEY (activity_id, seq_no)
        )
        """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS ride_xdata (
            activity_id BIGINT NOT NULL,
            series_name VARCHAR NOT NULL,
            seq_no INTEGER NOT NULL,
            secs DOUBLE NOT NULL,
            payload VARCHAR,
            PRIMARY KEY (activity_id, series_name, seq_no)
        )
        """)
    conn.execute("""
        CREATE TABLE IF NOT EXISTS ride_tags (
            activity_id BIGINT NOT NULL,
            name VARCHAR NOT NULL,
            value VARCHAR,
            PRIMARY KEY (activity_id, name)
        )
        """)


def save_ride(
    activity_id: int,
    ride: RideFile,
    db_path: str | Path | None = None,
) -> None:
    """Write ride to DuckDB, replacing any stored version of activity_id."""
    sample_rows = [
        (activity_id, seq_no, *(getattr(point, col) for col in _SAMPLE_COLUMNS))
        for seq_no, point in enumerate(ride.data_points)
    ]
    xdata_rows = [
        (activity_id, name, seq_no, point.secs, json.dumps(point.values))
        for name, points in ride.xdata_series.items()
        for seq_no, point in enumerate(points)
    ]
    tag_rows = [(activity_id, name, value) for name, value in ride.tags.items()]

    with open_db(db_path) as conn:
        ensure_tables(conn)
        with transaction(conn):
            for table in ("rides", "ride_samples", "ride_xdata", "ride_tags"):
                conn.execute(
                    f"DELETE FROM {table} WHERE activity_id = ?", [activity_id]
                )
            conn.execute(
                "INSERT INTO rides (activity_id, rec_int_secs) VALUES (?, ?)",
                [activity_id, ride.rec_int_secs],
            )
            if sample_rows:
                conn.executemany(
                    "INSERT INTO ride_samples VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    sample_rows,
                )
            if xdata_rows:
                conn.executemany(
                    "INSERT INTO ride_xdata VALUES (?, ?, ?, ?, ?)", xdata_rows
                )
            if tag_rows:
                conn.executemany("INSERT INTO ride_tags VALUES (?, ?, ?)", tag_rows)

    logger.info(
        f"Saved ride {activity_id}: {len(sample_rows)} samples, "
        f"{len(xdata_rows)} xdata points, {len(tag_rows)} tags"
    )


def load_ride(
    activity_id: int,
    db_path: str | Path | None = None,
) -> RideFile | None:
    """Load a stored ride.

    Returns:
        RideFile, or None if activity_id is not stored.

    Raises:
        pydantic.ValidationError: If a stored row is not a valid sample.
    """
    path = get_db_path(db_path)
    if not path.exists():
        logger.warning(f"Database not found: {path}")
        return None

    with open_db(path, read_only=True) as conn:
        try:
            header = conn.execute(
                "SELECT rec_int_secs FROM rides WHERE activity_id = ?", [activity_id]
            ).fetchone()
        except duckdb.CatalogException:
            logger.warning("Database has no rides table")
            return None
        if header is None:
            logger.warning(f"Ride not found: {activity_id}")
            return None

        sample_rows = conn.execute(
            f"SELECT {', '.join(_SAMPLE_COLUMNS)} FROM ride_samples "
            "WHERE activity_id = ? ORDER BY seq_no",
            [activity_id],
        ).fetchall()
        xdata_rows = conn.execute(
            "SELECT series_name, secs, payload FROM ride_xdata "
            "WHERE activity_id = ? ORDER BY series_name, seq_no",
            [activity_id],
        ).fetchall()
        tag_rows = conn.execute(
            "SELECT name, value FROM ride_tags WHERE activity_id = ?", [activity_id]
        ).fetchall()

    samples = [_sample_from_row(row) for row in sample_rows]

    xdata: dict[str, list[AnnotationPoint]] = {}
    for series_name, secs, payload in xdata_rows:
        xdata.setdefault(series_name, []).append(
            AnnotationPoint(secs=secs, values=json.loads(payload) if payload else {})
        )

    return RideFile(
        data_points=samples,
        rec_int_secs=header[0],
        xdata=xdata,
        tags=dict(tag_rows),
    )


def _sample_from_row(row: tuple[Any, ...]) -> Sample:
    data = dict(zip(_SAMPLE_COLUMNS, row, strict=True))
    if data["watts"] is None:
        data["watts"] = 0.0
    return Sample.model_validate(data)
