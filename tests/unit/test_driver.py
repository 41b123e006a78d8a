"""Tests for the run driver: in-place rewriting, traversal and fail-fast errors."""

from __future__ import annotations

from pathlib import Path

import pytest

from enum_instrumenter.driver import (
    instrument_file,
    instrument_path,
    iter_source_files,
)
from enum_instrumenter.errors import (
    InvalidPathError,
    SourceIOError,
    SourceParseError,
    TraversalError,
)
from enum_instrumenter.run_types import FileReport, InstrumentConfig
from enum_instrumenter.state import InstrumentationState

ENUM_FILE = """\
pub enum Light {
    Red,
    Green,
}

fn start() {
    let l = Light::Red;
}
"""

USE_FILE = """\
fn next() {
    let l = Light::Green;
}
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _project(root: Path) -> Path:
    _write(root / "a.rs", ENUM_FILE)
    _write(root / "b.rs", USE_FILE)
    _write(root / "nested" / "c.rs", "fn again() { show(Light::Red); }\n")
    _write(root / "notes.txt", "let l = Light::Red;\n")
    return root


class TestInstrumentFile:
    def test_overwrites_in_place(self, tmp_path):
        path = _write(tmp_path / "main.rs", ENUM_FILE)
        report = instrument_file(path, InstrumentationState())
        text = path.read_text(encoding="utf-8")
        assert "    sginstrument::instrument(1u32, 0u32);\n    let l = Light::Red;" in text
        assert isinstance(report, FileReport)
        assert report.path == path
        assert len(report.sites) == 1
        assert report.output_bytes > report.source_bytes

    def test_file_without_usages_unchanged(self, tmp_path):
        source = 'fn main() { println!("hi"); }\n'
        path = _write(tmp_path / "main.rs", source)
        report = instrument_file(path, InstrumentationState())
        assert path.read_text(encoding="utf-8") == source
        assert report.sites == []

    def test_crlf_line_endings_kept(self, tmp_path):
        path = tmp_path / "main.rs"
        path.write_bytes(b"enum E { A }\r\nfn main() {\r\n    let e = E::A;\r\n}\r\n")
        instrument_file(path, InstrumentationState())
        assert path.read_bytes() == (
            b"enum E { A }\r\nfn main() {\r\n"
            b"    sginstrument::instrument(1u32, 0u32);\r\n"
            b"    let e = E::A;\r\n}\r\n"
        )

    def test_parse_error_leaves_file_untouched(self, tmp_path):
        path = _write(tmp_path / "broken.rs", "fn main( {\n")
        with pytest.raises(SourceParseError) as excinfo:
            instrument_file(path, InstrumentationState())
        assert excinfo.value.path == path
        assert str(path) in str(excinfo.value)
        assert path.read_text(encoding="utf-8") == "fn main( {\n"

    def test_read_error_wrapped_with_path(self, tmp_path):
        missing = tmp_path / "missing.rs"
        with pytest.raises(SourceIOError) as excinfo:
            instrument_file(missing, InstrumentationState())
        assert excinfo.value.path == missing
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_non_utf8_file_is_io_error(self, tmp_path):
        path = tmp_path / "latin1.rs"
        path.write_bytes(b'fn main() { let s = "\xe9"; }\n')
        with pytest.raises(SourceIOError):
            instrument_file(path, InstrumentationState())


class TestIterSourceFiles:
    def test_recursive_sorted_and_filtered(self, tmp_path):
        _project(tmp_path)
        files = list(iter_source_files(tmp_path))
        assert files == [
            tmp_path / "a.rs",
            tmp_path / "b.rs",
            tmp_path / "nested" / "c.rs",
        ]

    def test_custom_extension(self, tmp_path):
        _project(tmp_path)
        config = InstrumentConfig(source_extension=".txt")
        assert list(iter_source_files(tmp_path, config)) == [tmp_path / "notes.txt"]

    def test_symlinks_not_followed(self, tmp_path):
        real = _write(tmp_path / "real" / "x.rs", USE_FILE)
        (tmp_path / "link.rs").symlink_to(real)
        assert list(iter_source_files(tmp_path)) == [real]

    def test_walk_failure_raises_traversal_error(self, tmp_path, monkeypatch):
        def failing_walk(top, onerror=None):
            onerror(PermissionError(13, "Permission denied", str(top)))
            yield from ()

        monkeypatch.setattr("enum_instrumenter.driver.os.walk", failing_walk)
        with pytest.raises(TraversalError) as excinfo:
            list(iter_source_files(tmp_path))
        assert excinfo.value.path == tmp_path


class TestInstrumentPath:
    def test_directory_shares_state_across_files(self, tmp_path):
        _project(tmp_path)
        stats = instrument_path(tmp_path)
        calls = [(s.call.location, s.call.state) for s in stats.sites]
        assert calls == [(1, 0), (2, 1), (3, 0)]
        assert [r.path.name for r in stats.files] == ["a.rs", "b.rs", "c.rs"]
        assert stats.enum_types == 1
        assert stats.registered_variants == 2
        assert stats.variant_ids == {"Light::Red": 0, "Light::Green": 1}
        assert "{ sginstrument::instrument(3u32, 0u32); Light::Red }" in (
            tmp_path / "nested" / "c.rs"
        ).read_text(encoding="utf-8")

    def test_other_extensions_untouched(self, tmp_path):
        _project(tmp_path)
        instrument_path(tmp_path)
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == (
            "let l = Light::Red;\n"
        )

    def test_single_file_any_extension(self, tmp_path):
        path = _write(tmp_path / "snippet.txt", ENUM_FILE)
        stats = instrument_path(path)
        assert len(stats.files) == 1
        assert "sginstrument::instrument(1u32, 0u32);" in path.read_text(encoding="utf-8")

    def test_on_file_called_per_file_in_order(self, tmp_path):
        _project(tmp_path)
        seen: list[str] = []
        instrument_path(tmp_path, on_file=lambda report: seen.append(report.path.name))
        assert seen == ["a.rs", "b.rs", "c.rs"]

    def test_reuses_given_state(self, tmp_path):
        _project(tmp_path)
        state = InstrumentationState()
        state.locations.next_location()
        stats = instrument_path(tmp_path, state=state)
        assert stats.sites[0].call.location == 2

    def test_invalid_path(self, tmp_path):
        missing = tmp_path / "nope"
        with pytest.raises(InvalidPathError) as excinfo:
            instrument_path(missing)
        assert excinfo.value.path == missing
        assert str(excinfo.value) == f"Invalid path: {missing}"

    def test_first_failure_aborts_run(self, tmp_path):
        _project(tmp_path)
        _write(tmp_path / "b.rs", "fn broken( {\n")
        seen: list[str] = []
        with pytest.raises(SourceParseError) as excinfo:
            instrument_path(tmp_path, on_file=lambda r: seen.append(r.path.name))
        assert excinfo.value.path == tmp_path / "b.rs"
        assert seen == ["a.rs"]
        # a.rs stays instrumented, c.rs was never reached
        assert "sginstrument" in (tmp_path / "a.rs").read_text(encoding="utf-8")
        assert (tmp_path / "nested" / "c.rs").read_text(encoding="utf-8") == (
            "fn again() { show(Light::Red); }\n"
        )
