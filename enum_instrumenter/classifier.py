"""Enum-usage classification for path expressions."""

from __future__ import annotations

from dataclasses import dataclass

from .syntax import SyntaxNode
from . import constants

PATH_NODE_TYPE = "scoped_identifier"
GENERIC_PATH_TYPES: frozenset[str] = frozenset(
    {"generic_type", "generic_type_with_turbofish"}
)


@dataclass(frozen=True)
class EnumUsage:
    enum_name: str
    variant_name: str

    @property
    def key(self) -> str:
        return f"{self.enum_name}{constants.PATH_SEPARATOR}{self.variant_name}"


def path_segments(node: SyntaxNode) -> list[str]:
    """Flatten a path expression into its segment names.

    ``crate::a::Status::<T>::Active`` yields
    ``["crate", "a", "Status", "Active"]``; generic arguments are dropped.
    """
    if node.type == PATH_NODE_TYPE:
        path = node.child_by_field_name("path")
        name = node.child_by_field_name("name")
        head = path_segments(path) if path is not None else []
        return head + ([name.body_text()] if name is not None else [])
    if node.type in GENERIC_PATH_TYPES:
        inner = node.child_by_field_name("type")
        return path_segments(inner) if inner is not None else [node.body_text()]
    return [node.body_text()]


def classify(node: SyntaxNode | None, enum_types: set[str]) -> EnumUsage | None:
    """Return the enum/variant a bare path denotes, or ``None``.

    Only the last two segments matter: the second-to-last must name an enum
    already recorded in *enum_types*. Anything that is not a bare path
    (calls, struct literals, parenthesized expressions) is not a usage.
    """
    if node is None or node.type != PATH_NODE_TYPE:
        return None
    segments = path_segments(node)
    if len(segments) < 2:
        return None
    enum_name, variant_name = segments[-2], segments[-1]
    if enum_name not in enum_types:
        return None
    return EnumUsage(enum_name=enum_name, variant_name=variant_name)
