"""Base protocol for ride data processors."""

from typing import Any, Protocol

from ride_processors.ride import RideFile
from ride_processors.settings import SettingsProvider


class DataProcessor(Protocol):
    """Protocol for post-processing filters run against a RideFile."""

    name: str

    def post_process(
        self,
        ride: RideFile,
        config: Any | None = None,
        op: str = "",
        settings: SettingsProvider | None = None,
    ) -> bool:
        """Process the ride in place and return True if it changed.

        config is None when run automatically; settings are then read
        from the settings provider.
        """
        ...

    def processor_config(self) -> Any:
        """Return a fresh configuration object for manual runs."""
        ...
