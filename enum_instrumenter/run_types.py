"""Run pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .model import InstrumentationSite
from .stats import count_shapes, count_variants
from . import constants


@dataclass(frozen=True)
class InstrumentConfig:
    """Groups instrumentation run configuration."""

    hook_path: str = constants.DEFAULT_HOOK_PATH
    source_extension: str = constants.RUST_SOURCE_EXTENSION
    language: str = constants.LANGUAGE_RUST
    # Visit directory entries in sorted order so ids are reproducible.
    sort_entries: bool = True


@dataclass
class FileReport:
    path: Path
    sites: list[InstrumentationSite] = field(default_factory=list)
    source_bytes: int = 0
    output_bytes: int = 0


@dataclass
class RunStats:
    """Per-file reports and totals for one instrumentation run."""

    files: list[FileReport] = field(default_factory=list)
    enum_types: int = 0
    # `Enum::Variant` key -> state id, in registration order
    variant_ids: dict[str, int] = field(default_factory=dict)

    @property
    def registered_variants(self) -> int:
        return len(self.variant_ids)

    @property
    def sites(self) -> list[InstrumentationSite]:
        return [site for report in self.files for site in report.sites]

    def report(self) -> str:
        sites = self.sites
        lines = [
            "═══ Instrumentation Statistics ═══",
            f"  Files processed:      {len(self.files)}",
            f"  Enum types seen:      {self.enum_types}",
            f"  Variants registered:  {self.registered_variants}",
            f"  Calls injected:       {len(sites)}",
        ]
        for shape, count in sorted(count_shapes(sites).items()):
            lines.append(f"    {shape.lower():<18} {count}")
        per_variant = count_variants(sites)
        if per_variant:
            lines.append("  Calls per variant:")
        for key, count in per_variant.items():
            state = self.variant_ids.get(key, "?")
            lines.append(f"    {key:<18} {count}  (state {state})")
        return "\n".join(lines)
