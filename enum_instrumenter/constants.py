"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

LANGUAGE_RUST = "rust"
RUST_SOURCE_EXTENSION = ".rs"

# Rust wrapper around the runtime's `__sfuzzer_instrument(c_uint, c_uint)`.
DEFAULT_HOOK_PATH = "sginstrument::instrument"
HOOK_ARG_SUFFIX = "u32"

PATH_SEPARATOR = "::"

FIRST_LOCATION = 1
FIRST_STATE = 0

PROGRESS_TEMPLATE = "Processed: {path}"
COMPLETION_MESSAGE = "Instrumentation complete!"
USAGE_TEMPLATE = "Usage: {prog} <path-to-rust-files>"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
