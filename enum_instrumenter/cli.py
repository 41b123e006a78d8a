"""Command-line entry point: ``enum-instrument <path-to-rust-files>``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .driver import instrument_path
from .errors import InstrumentError, UsageError
from .run_types import FileReport, InstrumentConfig
from . import constants

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad invocations as ``UsageError``."""

    def error(self, message: str):
        raise UsageError(constants.USAGE_TEMPLATE.format(prog=self.prog))


def build_arg_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=prog,
        description=(
            "Inject enum-state instrumentation calls into Rust sources. "
            "Files are overwritten in place."
        ),
    )
    parser.add_argument("path", help="Rust source file or directory to instrument")
    parser.add_argument(
        "--hook-path",
        default=constants.DEFAULT_HOOK_PATH,
        help=f"Path of the hook function (default: {constants.DEFAULT_HOOK_PATH})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every injected call and print run statistics",
    )
    return parser


def _print_progress(report: FileReport) -> None:
    print(constants.PROGRESS_TEMPLATE.format(path=report.path))


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        return constants.EXIT_USAGE

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    config = InstrumentConfig(hook_path=args.hook_path)

    try:
        stats = instrument_path(Path(args.path), config, on_file=_print_progress)
    except InstrumentError as exc:
        logger.debug("Run aborted", exc_info=True)
        print(exc, file=sys.stderr)
        return constants.EXIT_FAILURE

    print(constants.COMPLETION_MESSAGE)
    if args.verbose:
        print(stats.report())
    return constants.EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
