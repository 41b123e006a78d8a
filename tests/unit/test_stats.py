"""Tests for instrumentation statistics: count_shapes (pure) and RunStats."""

from pathlib import Path

import pydantic
import pytest

from enum_instrumenter.model import (
    InjectionShape,
    InstrumentationCall,
    InstrumentationSite,
)
from enum_instrumenter.run_types import FileReport, RunStats
from enum_instrumenter.stats import count_shapes, count_variants


def _site(location: int, state: int, variant: str, shape: InjectionShape) -> InstrumentationSite:
    return InstrumentationSite(
        call=InstrumentationCall(location=location, state=state),
        enum_name="Status",
        variant_name=variant,
        shape=shape,
    )


class TestCountShapes:
    def test_empty_list_returns_empty_dict(self):
        assert count_shapes([]) == {}

    def test_repeated_shapes_are_summed(self):
        sites = [
            _site(1, 0, "Active", InjectionShape.LET),
            _site(2, 1, "Inactive", InjectionShape.LET),
            _site(3, 0, "Active", InjectionShape.ARGUMENT),
        ]
        assert count_shapes(sites) == {"LET": 2, "ARGUMENT": 1}

    def test_count_variants(self):
        sites = [
            _site(1, 0, "Active", InjectionShape.LET),
            _site(2, 0, "Active", InjectionShape.ASSIGN),
        ]
        assert count_variants(sites) == {"Status::Active": 2}


class TestRunStats:
    def test_sites_flattened_in_file_order(self):
        stats = RunStats(
            files=[
                FileReport(path=Path("a.rs"), sites=[_site(1, 0, "Active", InjectionShape.LET)]),
                FileReport(path=Path("b.rs"), sites=[_site(2, 1, "Inactive", InjectionShape.ASSIGN)]),
            ]
        )
        assert [s.call.location for s in stats.sites] == [1, 2]

    def test_report(self):
        stats = RunStats(
            files=[FileReport(path=Path("a.rs"), sites=[_site(1, 0, "Active", InjectionShape.LET)])],
            enum_types=1,
            variant_ids={"Status::Active": 0},
        )
        report = stats.report()
        assert "Files processed:      1" in report
        assert "Calls injected:       1" in report
        assert "let" in report
        assert "Variants registered:  1" in report
        assert "Status::Active     1  (state 0)" in report

    def test_report_omits_variant_section_without_calls(self):
        assert "Calls per variant" not in RunStats().report()


class TestInstrumentationCall:
    def test_render(self):
        call = InstrumentationCall(location=3, state=0)
        assert call.render() == "sginstrument::instrument(3u32, 0u32);"
        assert call.render("rt::hit") == "rt::hit(3u32, 0u32);"

    def test_rejects_values_outside_u32(self):
        with pytest.raises(pydantic.ValidationError):
            InstrumentationCall(location=-1, state=0)
        with pytest.raises(pydantic.ValidationError):
            InstrumentationCall(location=1, state=2**32)
