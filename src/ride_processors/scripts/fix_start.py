"""Run "Remove Bad Start Values" against a ride stored in DuckDB.

Usage:
    # Automatic run (settings from the database / environment)
    python -m ride_processors.scripts.fix_start --activity-id 12345

    # Manual run with an explicit "seconds to process" value
    python -m ride_processors.scripts.fix_start --activity-id 12345 --seconds 15

    # Show what would be deleted without saving, keeping a log file
    python -m ride_processors.scripts.fix_start --activity-id 12345 --dry-run \
        --log-file data/logs/fix_start.log
"""

import argparse
import logging
import sys
from pathlib import Path

from ride_processors.config import MAX_SECONDS_TO_PROCESS, get_config
from ride_processors.database.connection import get_db_path
from ride_processors.database.ride_store import load_ride, save_ride
from ride_processors.models import FixStartConfig
from ride_processors.processors import FIX_START_NAME, get_processor
from ride_processors.processors.fix_start import (
    DELETED_POINTS_TAG,
    DELETED_POWER_RANGE_TAG,
)
from ride_processors.settings import DuckDBSettings
from ride_processors.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def seconds_to_process(value: str) -> float:
    """argparse type for --seconds: a number in [0, MAX_SECONDS_TO_PROCESS]."""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if not 0 <= seconds <= MAX_SECONDS_TO_PROCESS:
        raise argparse.ArgumentTypeError(
            f"must be between 0 and {MAX_SECONDS_TO_PROCESS}, got {value}"
        )
    return seconds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete bad power samples after activity start or resume"
    )
    parser.add_argument(
        "--activity-id", type=int, required=True, help="Stored activity ID"
    )
    parser.add_argument(
        "--db-path", type=str, default=None, help="DuckDB path (default: data dir)"
    )
    parser.add_argument(
        "--seconds",
        type=seconds_to_process,
        default=None,
        help="Seconds to process (manual run, 0-99.99); saved as the new default",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Report without saving the ride"
    )
    parser.add_argument("--log-level", type=str, default=None, help="Log level")
    parser.add_argument(
        "--log-file", type=Path, default=None, help="Also append log records here"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = get_config()
    setup_logging(args.log_level or config.log_level, args.log_file)

    db_path = get_db_path(args.db_path)
    ride = load_ride(args.activity_id, db_path)
    if ride is None:
        logger.error(f"Activity {args.activity_id} not found in {db_path}")
        return 1

    settings = DuckDBSettings(db_path)
    processor = get_processor(FIX_START_NAME)

    fix_config: FixStartConfig | None = None
    if args.seconds is not None:
        fix_config = FixStartConfig(seconds_to_process=args.seconds)
        if not args.dry_run:
            fix_config.save_config(settings)

    points_before = len(ride.data_points)
    changed = processor.post_process(
        ride, fix_config, "manual" if fix_config else "auto", settings=settings
    )

    print(f"Activity {args.activity_id}: {points_before} -> {len(ride.data_points)}")
    print(f"  {DELETED_POINTS_TAG}: {ride.get_tag(DELETED_POINTS_TAG, '0')}")
    print(f"  {DELETED_POWER_RANGE_TAG}: {ride.get_tag(DELETED_POWER_RANGE_TAG, '-')}")

    if args.dry_run:
        print("Dry run: ride not saved")
    elif changed:
        save_ride(args.activity_id, ride, db_path)
        print("Ride saved")
    else:
        print("No changes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
