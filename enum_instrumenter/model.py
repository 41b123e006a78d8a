"""Instrumentation value objects — what gets injected, and where."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from . import constants


class InjectionShape(str, Enum):
    # Statement inserted before `let x = Enum::Variant;`
    LET = "LET"
    # Statement inserted before `x = Enum::Variant;`
    ASSIGN = "ASSIGN"
    # Argument rewritten to `{ hook(..); Enum::Variant }`
    ARGUMENT = "ARGUMENT"


class SourceLocation(BaseModel):
    """Structured source span from tree-sitter AST nodes."""

    model_config = ConfigDict(frozen=True)

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)

U32_MAX = 2**32 - 1


class InstrumentationCall(BaseModel):
    """One `(location, state)` report, rendered as a hook invocation."""

    location: int = Field(ge=0, le=U32_MAX)
    state: int = Field(ge=0, le=U32_MAX)

    def arguments(self) -> tuple[str, str]:
        suffix = constants.HOOK_ARG_SUFFIX
        return f"{self.location}{suffix}", f"{self.state}{suffix}"

    def render(self, hook_path: str = constants.DEFAULT_HOOK_PATH) -> str:
        location, state = self.arguments()
        return f"{hook_path}({location}, {state});"

    def __str__(self) -> str:
        return self.render()


class InstrumentationSite(BaseModel):
    call: InstrumentationCall
    enum_name: str
    variant_name: str
    shape: InjectionShape
    source_location: SourceLocation = NO_SOURCE_LOCATION

    @property
    def variant_key(self) -> str:
        return f"{self.enum_name}{constants.PATH_SEPARATOR}{self.variant_name}"

    def __str__(self) -> str:
        return (
            f"{self.shape.value.lower()} {self.variant_key} -> "
            f"location={self.call.location} state={self.call.state}"
            f"  # {self.source_location}"
        )
