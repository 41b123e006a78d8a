"""Error taxonomy for an instrumentation run.

Every failure aborts the run. Per-file failures carry the offending path so
the caller can report exactly which file stopped the run; files processed
before it stay overwritten.
"""

from __future__ import annotations

from pathlib import Path


class InstrumentError(Exception):
    """Base class for every error surfaced by an instrumentation run."""

    pass


class UsageError(InstrumentError):
    """Raised when the command line does not match the invocation form."""

    pass


class InvalidPathError(InstrumentError):
    """Raised when the target is neither an existing file nor a directory."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Invalid path: {path}")


class FileProcessingError(InstrumentError):
    """A failure tied to one specific source file."""

    def __init__(self, path: Path, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"Error processing {path}: {cause}")


class SourceParseError(FileProcessingError):
    """Raised when the parser reports syntax errors in a file."""

    pass


class SourceIOError(FileProcessingError):
    """Raised when a file cannot be read or written back."""

    pass


class TraversalError(InstrumentError):
    """Raised when walking a directory tree fails."""

    def __init__(self, path: Path, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"Error walking {path}: {cause}")
