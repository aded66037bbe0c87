"""Processor registry: name -> DataProcessor.

Processors register themselves when their module is imported; hosts look
them up by name for manual runs or run all of them with auto_process().
"""

import logging

from ride_processors.processors.base import DataProcessor
from ride_processors.ride import RideFile
from ride_processors.settings import SettingsProvider

logger = logging.getLogger(__name__)

_PROCESSORS: dict[str, DataProcessor] = {}


def register_processor(name: str, processor: DataProcessor) -> bool:
    """Register processor under name. Returns False if the name is taken."""
    if name in _PROCESSORS:
        logger.warning(f"Processor already registered: {name}")
        return False
    _PROCESSORS[name] = processor
    return True


def unregister_processor(name: str) -> DataProcessor | None:
    return _PROCESSORS.pop(name, None)


def get_processor(name: str) -> DataProcessor:
    """Return the processor registered under name.

    Raises:
        KeyError: If no processor has that name.
    """
    try:
        return _PROCESSORS[name]
    except KeyError:
        raise KeyError(f"Unknown processor: {name}") from None


def processor_names() -> list[str]:
    return sorted(_PROCESSORS)


def auto_process(ride: RideFile, settings: SettingsProvider) -> dict[str, bool]:
    """Run every registered processor without an explicit config.

    Returns:
        Dict mapping processor name to whether it changed the ride.
    """
    changed: dict[str, bool] = {}
    for name in processor_names():
        logger.info(f"Running processor: {name}")
        changed[name] = _PROCESSORS[name].post_process(
            ride, None, "auto", settings=settings
        )
    return changed
