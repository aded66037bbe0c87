"""
Ride data processors.

- DataProcessor: Protocol every processor satisfies
- FixStart: "Remove Bad Start Values" (zero power and weak gap starts)

Importing this package registers the built-in processors.
"""

from ride_processors.processors.base import DataProcessor
from ride_processors.processors.fix_start import (
    FIX_START_NAME,
    FixStart,
    remove_bad_start_values,
)
from ride_processors.processors.registry import (
    auto_process,
    get_processor,
    processor_names,
    register_processor,
)

_fix_start_registered = register_processor(FIX_START_NAME, FixStart())

__all__ = [
    "DataProcessor",
    "FIX_START_NAME",
    "FixStart",
    "auto_process",
    "get_processor",
    "processor_names",
    "register_processor",
    "remove_bad_start_values",
]
