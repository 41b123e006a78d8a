"""Run-wide instrumentation state, shared across every file of a run.

Variant ids and locations must stay stable over the whole instrumented
program for the fuzzer's coverage map to be meaningful, so one
``InstrumentationState`` is created per run and threaded through every
transformer instance.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from .model import InstrumentationCall
from . import constants

logger = logging.getLogger(__name__)


class VariantRegistry:
    """Assigns 0-based ids to ``Enum::Variant`` keys in first-seen order."""

    def __init__(self):
        self._ids: dict[str, int] = {}

    def variant_id(self, key: str) -> int:
        if key not in self._ids:
            self._ids[key] = constants.FIRST_STATE + len(self._ids)
            logger.debug("Registered state %d for %s", self._ids[key], key)
        return self._ids[key]

    def items(self) -> list[tuple[str, int]]:
        return list(self._ids.items())

    def __contains__(self, key: str) -> bool:
        return key in self._ids

    def __len__(self) -> int:
        return len(self._ids)


class LocationAllocator:
    """Hands out strictly increasing location ids, starting at 1."""

    def __init__(self, start: int = constants.FIRST_LOCATION):
        self._next = start

    def next_location(self) -> int:
        location = self._next
        self._next += 1
        return location

    @property
    def allocated(self) -> int:
        return self._next - constants.FIRST_LOCATION


class ConstContextTracker:
    """Scoped flag that is true inside compile-time-evaluated code.

    ``enter_const`` returns the flag value it replaced; ``exit_const`` puts
    it back. Nested scopes compose: once any enclosing scope is const, the
    whole sub-tree stays suppressed.
    """

    def __init__(self):
        self._in_const = False

    @property
    def active(self) -> bool:
        return self._in_const

    def enter_const(self) -> bool:
        saved = self._in_const
        self._in_const = True
        return saved

    def exit_const(self, saved: bool) -> None:
        self._in_const = saved

    @contextmanager
    def scope(self, is_const: bool = True) -> Iterator[None]:
        """Run the enclosed visit inside a const scope when *is_const*."""
        if not is_const:
            yield
            return
        saved = self.enter_const()
        try:
            yield
        finally:
            self.exit_const(saved)


@dataclass
class InstrumentationState:
    enum_types: set[str] = field(default_factory=set)
    variants: VariantRegistry = field(default_factory=VariantRegistry)
    locations: LocationAllocator = field(default_factory=LocationAllocator)
    const_context: ConstContextTracker = field(default_factory=ConstContextTracker)

    def record_enum(self, name: str) -> None:
        if name not in self.enum_types:
            logger.debug("Discovered enum %s", name)
        self.enum_types.add(name)

    def allocate_call(
        self, enum_name: str, variant_name: str
    ) -> InstrumentationCall | None:
        """Allocate a location and state for one usage, or ``None`` in const code."""
        if self.const_context.active:
            return None
        location = self.locations.next_location()
        key = f"{enum_name}{constants.PATH_SEPARATOR}{variant_name}"
        return InstrumentationCall(
            location=location, state=self.variants.variant_id(key)
        )
