"""Pydantic models for ride samples, annotations and filter results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from ride_processors.config import DEFAULT_SECONDS_TO_PROCESS, MAX_SECONDS_TO_PROCESS
from ride_processors.settings import FIX_START_SECONDS_KEY

if TYPE_CHECKING:
    from ride_processors.settings import SettingsProvider


class Sample(BaseModel):
    """One timestamped reading in a ride's primary series.

    Only ``secs`` and ``watts`` are read by the filters; the remaining
    channels are carried along untouched.
    """

    secs: float = Field(description="Seconds from recording start")
    watts: float = Field(default=0.0, description="Power (0 means no signal)")
    hr: float | None = None
    cad: float | None = None
    km: float | None = None
    kph: float | None = None
    alt: float | None = None


class AnnotationPoint(BaseModel):
    """One entry of an auxiliary named series (e.g. "DEVELOPER")."""

    secs: float
    values: dict[str, Any] = Field(default_factory=dict)


class FilterResult(BaseModel):
    """Outcome of one Start-Gap Filter run."""

    deleted_count: int = Field(default=0, ge=0)
    min_deleted_power: float = 0.0
    max_deleted_power: float = 0.0
    deleted_secs: list[int] = Field(default_factory=list)
    deleted_annotations: int = Field(default=0, ge=0)

    @property
    def changed(self) -> bool:
        return self.deleted_count != 0


class FixStartConfig(BaseModel):
    """Manual configuration for the "Remove Bad Start Values" processor."""

    seconds_to_process: float = Field(
        default=DEFAULT_SECONDS_TO_PROCESS,
        ge=0,
        le=MAX_SECONDS_TO_PROCESS,
        description="Maximum duration of a bad values period",
    )

    @classmethod
    def read_config(cls, settings: SettingsProvider) -> FixStartConfig:
        """Load the persisted "seconds to process" value.

        Stored values outside the allowed range are clamped, not rejected.
        """
        seconds = float(settings.get(FIX_START_SECONDS_KEY, DEFAULT_SECONDS_TO_PROCESS))
        seconds = min(max(seconds, 0.0), MAX_SECONDS_TO_PROCESS)
        return cls(seconds_to_process=seconds)

    def save_config(self, settings: SettingsProvider) -> None:
        settings.set(FIX_START_SECONDS_KEY, self.seconds_to_process)

    @staticmethod
    def explain() -> str:
        return (
            "On activity start, or resume from pause, there are bad values "
            "for the first N seconds. This function removes them, taking one "
            "parameter;\n\n"
            "seconds_to_process - this defines the maximum duration of a bad "
            "values period that will be deleted. Bad values after this period "
            "will not be affected.\n\n"
        )
