"""Tree transformers that inject enum-state instrumentation."""

from __future__ import annotations

from ._base import BaseTransformer
from ..state import InstrumentationState
from .. import constants

# Lazy imports to avoid loading every transformer at startup
_TRANSFORMER_CLASSES: dict[str, str] = {
    constants.LANGUAGE_RUST: "rust.RustEnumInstrumenter",
}


def get_transformer(
    language: str,
    state: InstrumentationState,
    hook_path: str = constants.DEFAULT_HOOK_PATH,
) -> BaseTransformer:
    """Instantiate the transformer for *language*, bound to the run's *state*.

    Raises ``ValueError`` if *language* has no registered transformer.
    """
    target = _TRANSFORMER_CLASSES.get(language)
    if target is None:
        raise ValueError(f"Unsupported language for instrumentation: {language}")
    module_name, class_name = target.split(".")
    import importlib

    mod = importlib.import_module(f".{module_name}", package=__package__)
    cls = getattr(mod, class_name)
    return cls(state, hook_path)


__all__ = [
    "BaseTransformer",
    "get_transformer",
]
