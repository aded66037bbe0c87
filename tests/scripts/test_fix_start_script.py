"""Tests for the fix_start script."""

from pathlib import Path

import duckdb
import pytest

from ride_processors.database.ride_store import load_ride, save_ride
from ride_processors.scripts.fix_start import main, parse_args
from ride_processors.settings import FIX_START_SECONDS_KEY, DuckDBSettings

ACTIVITY_ID = 42


@pytest.fixture
def db_with_ride(make_ride, sample_points, temp_db_path: Path) -> Path:
    save_ride(ACTIVITY_ID, make_ride(sample_points, developer=[(0, "X")]), temp_db_path)
    return temp_db_path


@pytest.mark.unit
class TestParseArgs:
    def test_defaults(self) -> None:
        args = parse_args(["--activity-id", "7"])
        assert args.activity_id == 7
        assert args.db_path is None
        assert args.seconds is None
        assert args.dry_run is False

    def test_activity_id_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])

    def test_seconds_in_range(self) -> None:
        assert parse_args(["--activity-id", "7", "--seconds", "99.99"]).seconds == 99.99

    @pytest.mark.parametrize("value", ["150", "-1", "abc"])
    def test_seconds_out_of_range_rejected(self, value: str, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--activity-id", "7", "--seconds", value])

        assert exc_info.value.code == 2
        assert "--seconds" in capsys.readouterr().err

    def test_log_file(self, tmp_path: Path) -> None:
        args = parse_args(["--activity-id", "7", "--log-file", str(tmp_path / "x.log")])
        assert args.log_file == tmp_path / "x.log"


@pytest.mark.integration
class TestMain:
    """End-to-end runs against a temporary DuckDB file."""

    def test_filters_and_saves(self, db_with_ride: Path, capsys) -> None:
        exit_code = main(["--activity-id", str(ACTIVITY_ID), "--db-path", str(db_with_ride)])

        assert exit_code == 0
        ride = load_ride(ACTIVITY_ID, db_with_ride)
        assert ride is not None
        assert [p.secs for p in ride.data_points] == [1, 3, 21]
        assert ride.xdata("DEVELOPER") is None
        assert ride.get_tag("Deleted Data Points") == "3"
        assert ride.get_tag("Deleted Power Range Time") == "0 - 100"
        out = capsys.readouterr().out
        assert "6 -> 3" in out
        assert "Ride saved" in out

    def test_dry_run_keeps_ride(self, db_with_ride: Path, capsys) -> None:
        exit_code = main(
            [
                "--activity-id",
                str(ACTIVITY_ID),
                "--db-path",
                str(db_with_ride),
                "--seconds",
                "15",
                "--dry-run",
            ]
        )

        assert exit_code == 0
        ride = load_ride(ACTIVITY_ID, db_with_ride)
        assert ride is not None
        assert len(ride.data_points) == 6
        assert DuckDBSettings(db_with_ride).get(FIX_START_SECONDS_KEY) is None
        assert "Dry run" in capsys.readouterr().out

    def test_manual_seconds_saved(self, db_with_ride: Path) -> None:
        main(
            [
                "--activity-id",
                str(ACTIVITY_ID),
                "--db-path",
                str(db_with_ride),
                "--seconds",
                "15",
            ]
        )

        assert DuckDBSettings(db_with_ride).get(FIX_START_SECONDS_KEY) == 15.0

    def test_second_run_reports_no_changes(self, db_with_ride: Path, capsys) -> None:
        argv = ["--activity-id", str(ACTIVITY_ID), "--db-path", str(db_with_ride)]
        main(argv)
        capsys.readouterr()

        assert main(argv) == 0
        assert "No changes" in capsys.readouterr().out

    def test_missing_activity(self, db_with_ride: Path) -> None:
        assert main(["--activity-id", "999", "--db-path", str(db_with_ride)]) == 1

    def test_out_of_range_seconds_leaves_ride(self, db_with_ride: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(
                [
                    "--activity-id",
                    str(ACTIVITY_ID),
                    "--db-path",
                    str(db_with_ride),
                    "--seconds",
                    "150",
                ]
            )

        assert exc_info.value.code == 2
        ride = load_ride(ACTIVITY_ID, db_with_ride)
        assert ride is not None
        assert len(ride.data_points) == 6
        assert DuckDBSettings(db_with_ride).get(FIX_START_SECONDS_KEY) is None

    def test_dry_run_creates_no_settings_table(self, db_with_ride: Path) -> None:
        main(
            [
                "--activity-id",
                str(ACTIVITY_ID),
                "--db-path",
                str(db_with_ride),
                "--dry-run",
            ]
        )

        with duckdb.connect(str(db_with_ride), read_only=True) as conn:
            tables = {
                row[0]
                for row in conn.execute(
                    "SELECT table_name FROM information_schema.tables"
                ).fetchall()
            }
        assert "app_settings" not in tables
        assert "rides" in tables

    def test_log_file_written(self, db_with_ride: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "fix_start.log"

        main(
            [
                "--activity-id",
                str(ACTIVITY_ID),
                "--db-path",
                str(db_with_ride),
                "--log-file",
                str(log_file),
            ]
        )

        assert "Remove Bad Start Values" in log_file.read_text(encoding="utf-8")
