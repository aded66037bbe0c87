"""Remove Bad Start Values.

On activity start, or resume from pause, power meters report garbage for
the first few samples. This processor deletes:

- every sample with zero power, and
- every sample that starts a gap in recording (its time is more than one
  recording interval after the last accepted sample) while its power is
  still below FIX_START_POWER_THRESHOLD.

Annotation points of the DEVELOPER series recorded at the same (rounded)
second as a deleted sample are deleted as well. All deletions of one run
form a single unit of work on the ride's command log.
"""

import logging
import math

from ride_processors.config import (
    DEFAULT_XDATA_NAME,
    FIX_START_POWER_THRESHOLD,
    get_config,
)
from ride_processors.models import FilterResult, FixStartConfig
from ride_processors.ride import RideFile
from ride_processors.settings import InMemorySettings, SettingsProvider

logger = logging.getLogger(__name__)

FIX_START_NAME = "Remove Bad Start Values"
DELETED_POINTS_TAG = "Deleted Data Points"
DELETED_POWER_RANGE_TAG = "Deleted Power Range Time"

# Far below any real timestamp, so the first sample always starts a gap
_NO_ACCEPTED_SECS = -999.0


def round_secs(secs: float) -> int:
    """Round to the nearest whole second, halves away from zero."""
    return int(math.copysign(math.floor(abs(secs) + 0.5), secs))


def format_number(value: float) -> str:
    """Number as tag text, up to 6 significant digits: 0, 87.5, 119.123."""
    return f"{value:g}"


def remove_bad_start_values(
    ride: RideFile,
    power_threshold: float = FIX_START_POWER_THRESHOLD,
    xdata_name: str = DEFAULT_XDATA_NAME,
) -> FilterResult:
    """Delete bad start samples from ride in place.

    Args:
        ride: Ride to filter. Samples and the xdata_name series are mutated
            through ride.command.
        power_threshold: Gap-starting samples below this power are deleted.
        xdata_name: Annotation series purged of points at deleted seconds.

    Returns:
        FilterResult with the deletion count and the power range of
        samples deleted by the gap rule. The range is seeded at 0.0 and
        only widens, so a run deleting positive powers reports a minimum
        of 0.
    """
    points = ride.data_points
    if len(points) < 2:
        # Not enough data to detect gaps (e.g. manual workouts)
        return FilterResult()

    deleted_secs: list[int] = []
    min_deleted_power = 0.0
    max_deleted_power = 0.0
    last_accepted_secs = _NO_ACCEPTED_SECS
    deleted_annotations = 0

    with ride.command.unit_of_work(FIX_START_NAME):
        position = 0
        while position < len(points):
            point = points[position]
            secs = round_secs(point.secs)

            if point.watts == 0.0:
                ride.command.delete_point(position)
                deleted_secs.append(secs)
                logger.debug(f"Deleted point at {secs} sec because of power 0")
                continue

            if point.secs > last_accepted_secs + ride.rec_int_secs:
                logger.debug(f"Detected gap at {secs} sec")
                if point.watts < power_threshold:
                    ride.command.delete_point(position)
                    deleted_secs.append(secs)
                    min_deleted_power = min(min_deleted_power, point.watts)
                    max_deleted_power = max(max_deleted_power, point.watts)
                    logger.debug(
                        f"Deleted point because of power {point.watts:.2f}"
                    )
                    continue

            last_accepted_secs = point.secs
            position += 1

        xpoints = ride.xdata(xdata_name)
        if xpoints is None:
            logger.debug(f"No {xdata_name} series, skipping annotation sweep")
        else:
            deleted_set = set(deleted_secs)
            position = 0
            while position < len(xpoints):
                xsecs = round_secs(xpoints[position].secs)
                if xsecs in deleted_set:
                    ride.command.delete_xdata_points(xdata_name, position, 1)
                    deleted_annotations += 1
                    logger.debug(f"Deleted {xdata_name} point at {xsecs} sec")
                else:
                    position += 1

    return FilterResult(
        deleted_count=len(deleted_secs),
        min_deleted_power=min_deleted_power,
        max_deleted_power=max_deleted_power,
        deleted_secs=deleted_secs,
        deleted_annotations=deleted_annotations,
    )


class FixStart:
    """DataProcessor wrapping remove_bad_start_values()."""

    name = FIX_START_NAME

    def __init__(
        self,
        power_threshold: float = FIX_START_POWER_THRESHOLD,
        xdata_name: str = DEFAULT_XDATA_NAME,
    ):
        self.power_threshold = power_threshold
        self.xdata_name = xdata_name

    def processor_config(self) -> FixStartConfig:
        return FixStartConfig()

    def post_process(
        self,
        ride: RideFile,
        config: FixStartConfig | None = None,
        op: str = "",
        settings: SettingsProvider | None = None,
    ) -> bool:
        """Filter ride and record the outcome as ride tags.

        Returns:
            True if any sample was deleted.
        """
        if config is None:  # being called automatically
            if settings is None:
                settings = InMemorySettings.from_config(get_config())
            seconds_to_process = FixStartConfig.read_config(settings).seconds_to_process
        else:  # being called manually
            seconds_to_process = config.seconds_to_process

        # TODO: bound the deleted bad-values period by seconds_to_process;
        # the deletion rules only use the fixed power threshold today.
        logger.debug(
            f"{self.name} op={op!r} seconds_to_process={seconds_to_process:.2f} "
            f"threshold={self.power_threshold:.1f}"
        )

        if len(ride.data_points) < 2:
            return False

        result = remove_bad_start_values(ride, self.power_threshold, self.xdata_name)

        ride.set_tag(DELETED_POINTS_TAG, str(result.deleted_count))
        ride.set_tag(
            DELETED_POWER_RANGE_TAG,
            f"{format_number(result.min_deleted_power)} - "
            f"{format_number(result.max_deleted_power)}",
        )
        logger.info(
            f"{self.name}: deleted {result.deleted_count} points, "
            f"{result.deleted_annotations} {self.xdata_name} points"
        )
        return result.changed
