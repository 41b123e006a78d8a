"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tree_sitter import Node, Tree

from . import constants


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


class Parser:
    """Thin wrapper around a parser factory."""

    def __init__(self, parser_factory: ParserFactory | None = None):
        self._factory = parser_factory or TreeSitterParserFactory()

    def parse(self, source: bytes, language: str = constants.LANGUAGE_RUST) -> Tree:
        parser = self._factory.get_parser(language)
        return parser.parse(source)


def first_error_node(node: Node) -> Node | None:
    """Return the first ERROR or MISSING node in document order, if any."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error_node(child)
        if found is not None:
            return found
    return node


def describe_syntax_error(tree: Tree) -> str:
    """Human-readable position of the first syntax error in *tree*."""
    node = first_error_node(tree.root_node)
    if node is None:
        return "no syntax error"
    line, col = node.start_point
    if node.is_missing:
        return f"syntax error at {line + 1}:{col}: missing {node.type!r}"
    return f"syntax error at {line + 1}:{col}"
