"""Pure functions for computing statistics over instrumentation sites."""

from __future__ import annotations

from collections import Counter

from enum_instrumenter.model import InstrumentationSite


def count_shapes(sites: list[InstrumentationSite]) -> dict[str, int]:
    """Return a frequency map of injection shape names in the given site list.

    Args:
        sites: A list of instrumentation sites.

    Returns:
        A dict mapping shape name strings to their occurrence counts.
        Empty dict for an empty input list.
    """
    return dict(Counter(site.shape.value for site in sites))


def count_variants(sites: list[InstrumentationSite]) -> dict[str, int]:
    """Return how many sites report each ``Enum::Variant`` key."""
    return dict(Counter(site.variant_key for site in sites))
