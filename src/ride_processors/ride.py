"""In-memory ride container and its mutation interface.

``RideFile`` owns the ordered sample series, the recording interval,
named annotation series ("xdata") and the metadata tags. Processors
never edit those lists directly; they go through ``RideFile.command``,
which groups mutations into labelled units of work so a host can treat
one processor run as a single step of its command history.

Usage:
    ride = RideFile(data_points=samples, rec_int_secs=1.0)
    with ride.command.unit_of_work("Remove Bad Start Values"):
        ride.command.delete_point(0)
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from ride_processors.models import AnnotationPoint, Sample

logger = logging.getLogger(__name__)


class RideCommandError(RuntimeError):
    """Raised when units of work are opened or closed out of order."""


@dataclass
class CommandRecord:
    """One applied mutation: operation name, position and removed items."""

    operation: str
    index: int
    removed: list[Any]
    series_name: str | None = None


@dataclass
class UnitOfWork:
    """A labelled group of mutations treated as one history step."""

    label: str
    records: list[CommandRecord] = field(default_factory=list)


class RideCommand:
    """Mutation interface for a RideFile."""

    def __init__(self, ride: RideFile):
        self._ride = ride
        self._current: UnitOfWork | None = None
        self.history: list[UnitOfWork] = []

    @property
    def in_luw(self) -> bool:
        return self._current is not None

    def start_luw(self, label: str) -> UnitOfWork:
        """Open and return a unit of work. Units of work do not nest."""
        if self._current is not None:
            raise RideCommandError(
                f"Cannot start '{label}': '{self._current.label}' is still open"
            )
        self._current = UnitOfWork(label=label)
        return self._current

    def end_luw(self) -> UnitOfWork:
        """Close the open unit of work and append it to the history."""
        if self._current is None:
            raise RideCommandError("No unit of work is open")
        luw, self._current = self._current, None
        self.history.append(luw)
        logger.debug(f"Closed unit of work '{luw.label}' ({len(luw.records)} ops)")
        return luw

    @contextmanager
    def unit_of_work(self, label: str) -> Generator[UnitOfWork, None, None]:
        """Open a unit of work for the duration of the block.

        The unit of work is closed even if the block raises, so the
        mutations already applied stay grouped in the history.
        """
        luw = self.start_luw(label)
        try:
            yield luw
        finally:
            self.end_luw()

    def _record(self, record: CommandRecord) -> None:
        if self._current is not None:
            self._current.records.append(record)
        else:
            self.history.append(UnitOfWork(label=record.operation, records=[record]))

    def delete_point(self, index: int) -> Sample:
        """Remove the sample at index; later samples shift down by one.

        Raises:
            IndexError: If index is outside the series.
        """
        points = self._ride.data_points
        if not 0 <= index < len(points):
            raise IndexError(f"Sample index {index} out of range ({len(points)})")
        removed = points.pop(index)
        self._record(CommandRecord("delete_point", index, [removed]))
        return removed

    def delete_xdata_points(
        self, name: str, index: int, count: int
    ) -> list[AnnotationPoint]:
        """Remove count points of the named series starting at index.

        Raises:
            KeyError: If the series does not exist.
            IndexError: If the range is outside the series.
        """
        points = self._ride.xdata_series[name]
        if count < 0 or not 0 <= index <= len(points) - count:
            raise IndexError(
                f"xdata '{name}' range [{index}, {index + count}) "
                f"out of range ({len(points)})"
            )
        removed = points[index : index + count]
        del points[index : index + count]
        self._record(CommandRecord("delete_xdata_points", index, removed, name))
        return removed


class RideFile:
    """A recorded activity: samples, annotation series and tags."""

    def __init__(
        self,
        data_points: list[Sample] | None = None,
        rec_int_secs: float = 1.0,
        xdata: dict[str, list[AnnotationPoint]] | None = None,
        tags: dict[str, str] | None = None,
    ):
        self.data_points: list[Sample] = list(data_points or [])
        self.rec_int_secs = rec_int_secs
        self.xdata_series: dict[str, list[AnnotationPoint]] = {
            name: list(points) for name, points in (xdata or {}).items()
        }
        self.tags: dict[str, str] = dict(tags or {})
        self.command = RideCommand(self)

    def xdata(self, name: str) -> list[AnnotationPoint] | None:
        """Return the named annotation series, or None if absent."""
        return self.xdata_series.get(name)

    def set_xdata(self, name: str, points: list[AnnotationPoint]) -> None:
        self.xdata_series[name] = list(points)

    def set_tag(self, name: str, value: str) -> None:
        self.tags[name] = value

    def get_tag(self, name: str, default: str | None = None) -> str | None:
        return self.tags.get(name, default)

    def __len__(self) -> int:
        return len(self.data_points)

    def __repr__(self) -> str:
        return (
            f"RideFile(points={len(self.data_points)}, "
            f"rec_int_secs={self.rec_int_secs}, xdata={list(self.xdata_series)})"
        )
