"""Run driver — parse, transform and rewrite source files in place.

Processed files are overwritten with no backup. A run stops at the first
failure; files already processed stay instrumented.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from .errors import (
    InvalidPathError,
    SourceIOError,
    SourceParseError,
    TraversalError,
)
from .model import InstrumentationSite
from .parser import Parser, describe_syntax_error
from .run_types import FileReport, InstrumentConfig, RunStats
from .state import InstrumentationState
from .syntax import SyntaxTree, mirror_tree
from .transformers import get_transformer
from . import constants

logger = logging.getLogger(__name__)

_INLINE_SOURCE_PATH = Path("<string>")


def parse_source(
    source: bytes,
    path: Path = _INLINE_SOURCE_PATH,
    parser: Parser | None = None,
    language: str = constants.LANGUAGE_RUST,
) -> SyntaxTree:
    """Parse *source* into a mutable syntax tree.

    Raises ``SourceParseError`` if the parser reports any syntax error.
    """
    tree = (parser or Parser()).parse(source, language)
    if tree.root_node.has_error:
        raise SourceParseError(path, describe_syntax_error(tree))
    return mirror_tree(tree, source)


def transform_source(
    source: str,
    state: InstrumentationState,
    config: InstrumentConfig = InstrumentConfig(),
    path: Path = _INLINE_SOURCE_PATH,
    parser: Parser | None = None,
) -> tuple[str, list[InstrumentationSite]]:
    """Instrument *source* against the run's *state*.

    Returns the regenerated source text and the sites instrumented in it.
    """
    tree = parse_source(source.encode("utf-8"), path, parser, config.language)
    transformer = get_transformer(config.language, state, config.hook_path)
    sites = transformer.transform(tree)
    return tree.to_source(), sites


def instrument_source(
    source: str,
    state: InstrumentationState | None = None,
    config: InstrumentConfig = InstrumentConfig(),
) -> str:
    """Instrument a single source string; a fresh state is used if none is given."""
    output, _ = transform_source(source, state or InstrumentationState(), config)
    return output


def instrument_file(
    path: Path,
    state: InstrumentationState,
    config: InstrumentConfig = InstrumentConfig(),
    parser: Parser | None = None,
) -> FileReport:
    """Instrument *path* and overwrite it with the result."""
    try:
        source = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceIOError(path, exc) from exc

    output, sites = transform_source(source, state, config, path, parser)

    try:
        path.write_bytes(output.encode("utf-8"))
    except OSError as exc:
        raise SourceIOError(path, exc) from exc

    logger.info("Instrumented %s: %d call(s)", path, len(sites))
    return FileReport(
        path=path,
        sites=sites,
        source_bytes=len(source.encode("utf-8")),
        output_bytes=len(output.encode("utf-8")),
    )


def iter_source_files(
    directory: Path, config: InstrumentConfig = InstrumentConfig()
) -> Iterator[Path]:
    """Yield every regular source file under *directory*, recursively.

    Symlinks are not followed. Raises ``TraversalError`` as soon as any
    directory cannot be listed.
    """

    def _raise(err: OSError) -> None:
        raise TraversalError(Path(err.filename or directory), err) from err

    for root, dirnames, filenames in os.walk(directory, onerror=_raise):
        if config.sort_entries:
            dirnames.sort()
            filenames.sort()
        for filename in filenames:
            candidate = Path(root) / filename
            if candidate.suffix != config.source_extension:
                continue
            if candidate.is_symlink() or not candidate.is_file():
                continue
            yield candidate


def instrument_path(
    path: Path,
    config: InstrumentConfig = InstrumentConfig(),
    state: InstrumentationState | None = None,
    on_file: Callable[[FileReport], None] | None = None,
) -> RunStats:
    """Instrument a single file, or every source file under a directory.

    *on_file* is called after each file has been written back.
    """
    state = state or InstrumentationState()
    if path.is_file():
        files: Iterator[Path] = iter([path])
    elif path.is_dir():
        files = iter_source_files(path, config)
    else:
        raise InvalidPathError(path)

    stats = RunStats()
    parser = Parser()
    for file_path in files:
        report = instrument_file(file_path, state, config, parser)
        stats.files.append(report)
        if on_file is not None:
            on_file(report)

    stats.enum_types = len(state.enum_types)
    stats.variant_ids = dict(state.variants.items())
    logger.info(
        "Run finished: %d file(s), %d call(s), %d location(s) allocated so far",
        len(stats.files),
        len(stats.sites),
        state.locations.allocated,
    )
    return stats
