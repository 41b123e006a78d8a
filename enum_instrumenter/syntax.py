"""Mutable syntax tree mirrored from a tree-sitter parse, and its printer.

tree-sitter trees are read-only, so the transformer works on a mirror: every
node keeps its type, its field name inside the parent, and the source text
that separated it from the previous sibling (``prefix``). Printing the mirror
regenerates the file. Untouched regions come back byte-for-byte and injected
nodes carry their own prefixes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from tree_sitter import Node, Tree

from .model import NO_SOURCE_LOCATION, SourceLocation
from . import constants


@dataclass(eq=False)
class SyntaxNode:
    type: str
    children: list[SyntaxNode] = field(default_factory=list)
    field_name: str | None = None
    prefix: str = ""
    suffix: str = ""
    # Only leaves carry text; inner nodes print their children.
    text: str = ""
    is_named: bool = True
    source_location: SourceLocation = field(
        default_factory=lambda: NO_SOURCE_LOCATION
    )

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def named_children(self) -> list[SyntaxNode]:
        return [c for c in self.children if c.is_named]

    def child_by_field_name(self, name: str) -> SyntaxNode | None:
        return next((c for c in self.children if c.field_name == name), None)

    def children_by_type(self, node_type: str) -> list[SyntaxNode]:
        return [c for c in self.children if c.type == node_type]

    def index_of(self, child: SyntaxNode) -> int:
        return next(i for i, c in enumerate(self.children) if c is child)

    def wrap_child(
        self, child: SyntaxNode, wrap: Callable[[SyntaxNode], SyntaxNode]
    ) -> SyntaxNode:
        """Replace *child* with ``wrap(child)``, keeping its position and layout."""
        idx = self.index_of(child)
        prefix, field_name = child.prefix, child.field_name
        wrapped = wrap(child)
        wrapped.prefix = prefix
        wrapped.field_name = field_name
        self.children[idx] = wrapped
        return wrapped

    def insert_before(self, anchor: SyntaxNode, new: SyntaxNode) -> None:
        """Insert *new* before *anchor*, both laid out with *anchor*'s prefix."""
        new.prefix = anchor.prefix
        self.children.insert(self.index_of(anchor), new)

    def to_source(self) -> str:
        parts: list[str] = []
        _print(self, parts)
        return "".join(parts)

    def body_text(self) -> str:
        """Source text of the node without its leading prefix."""
        return self.to_source()[len(self.prefix) :]

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"SyntaxNode({self.type!r}, text={self.text!r})"
        return f"SyntaxNode({self.type!r}, children={len(self.children)})"


def _print(node: SyntaxNode, parts: list[str]) -> None:
    parts.append(node.prefix)
    if node.is_leaf:
        parts.append(node.text)
        return
    for child in node.children:
        _print(child, parts)
    parts.append(node.suffix)


@dataclass(eq=False)
class SyntaxTree:
    root: SyntaxNode
    # Text outside the root node's span (leading BOM/whitespace, trailing newlines).
    leading: str = ""
    trailing: str = ""

    def to_source(self) -> str:
        return self.leading + self.root.to_source() + self.trailing


# ── conversion from tree-sitter ──────────────────────────────────


def _source_loc(node: Node) -> SourceLocation:
    s, e = node.start_point, node.end_point
    return SourceLocation(
        start_line=s[0] + 1,
        start_col=s[1],
        end_line=e[0] + 1,
        end_col=e[1],
    )


def _mirror(node: Node, source: bytes, field_name: str | None, prefix: str) -> SyntaxNode:
    mirrored = SyntaxNode(
        type=node.type,
        field_name=field_name,
        prefix=prefix,
        is_named=node.is_named,
        source_location=_source_loc(node),
    )
    cursor = node.walk()
    if not cursor.goto_first_child():
        mirrored.text = source[node.start_byte : node.end_byte].decode("utf-8")
        return mirrored
    pos = node.start_byte
    while True:
        child = cursor.node
        gap = source[pos : child.start_byte].decode("utf-8")
        mirrored.children.append(_mirror(child, source, cursor.field_name, gap))
        pos = max(pos, child.end_byte)
        if not cursor.goto_next_sibling():
            break
    mirrored.suffix = source[pos : node.end_byte].decode("utf-8")
    return mirrored


def mirror_tree(tree: Tree, source: bytes) -> SyntaxTree:
    root = tree.root_node
    return SyntaxTree(
        root=_mirror(root, source, None, ""),
        leading=source[: root.start_byte].decode("utf-8"),
        trailing=source[root.end_byte :].decode("utf-8"),
    )


# ── node factories for injected code ─────────────────────────────


def leaf(node_type: str, text: str, *, prefix: str = "", named: bool = True) -> SyntaxNode:
    return SyntaxNode(type=node_type, text=text, prefix=prefix, is_named=named)


def token(text: str, *, prefix: str = "") -> SyntaxNode:
    return leaf(text, text, prefix=prefix, named=False)


def path_node(path: str) -> SyntaxNode:
    """Build an ``identifier`` / ``scoped_identifier`` chain for ``a::b::c``."""
    segments = [s.strip() for s in path.split(constants.PATH_SEPARATOR)]
    node = leaf("identifier", segments[0])
    for segment in segments[1:]:
        node.field_name = "path"
        name = leaf("identifier", segment)
        name.field_name = "name"
        node = SyntaxNode(
            type="scoped_identifier",
            children=[node, token(constants.PATH_SEPARATOR), name],
        )
    return node


def call_statement(function_path: str, arguments: list[str]) -> SyntaxNode:
    """``function_path(arg, arg);`` as an ``expression_statement``."""
    function = path_node(function_path)
    function.field_name = "function"
    args: list[SyntaxNode] = [token("(")]
    for i, arg in enumerate(arguments):
        if i:
            args.append(token(","))
        args.append(leaf("integer_literal", arg, prefix=" " if i else ""))
    args.append(token(")"))
    arg_list = SyntaxNode(type="arguments", children=args, field_name="arguments")
    call = SyntaxNode(type="call_expression", children=[function, arg_list])
    return SyntaxNode(type="expression_statement", children=[call, token(";")])


def scoped_block(statement: SyntaxNode, value: SyntaxNode) -> SyntaxNode:
    """``{ statement value }`` — a block expression evaluating to *value*."""
    statement.prefix = " "
    value.prefix = " "
    value.field_name = None
    return SyntaxNode(
        type="block",
        children=[token("{"), statement, value, token("}", prefix=" ")],
    )
