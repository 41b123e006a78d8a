"""Enum-state instrumentation for Rust sources."""

from .driver import (  # noqa: F401
    instrument_file,
    instrument_path,
    instrument_source,
    transform_source,
)
from .run_types import InstrumentConfig, RunStats  # noqa: F401
from .state import InstrumentationState  # noqa: F401
