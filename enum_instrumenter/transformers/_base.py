"""BaseTransformer — language-agnostic dispatch over mirrored syntax trees."""

from __future__ import annotations

import logging
import re
from typing import Callable

from ..classifier import EnumUsage
from ..model import InjectionShape, InstrumentationCall, InstrumentationSite
from ..state import InstrumentationState
from ..syntax import SyntaxNode, SyntaxTree
from .. import constants, syntax

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


class BaseTransformer:
    """Base class for tree transformers that inject hook calls.

    Subclasses populate ``_DISPATCH`` with one handler per node type they
    care about; every other node is walked generically. Handlers are
    responsible for descending into their own children.
    """

    CALL_FUNCTION_FIELD: str = "function"
    CALL_ARGUMENTS_FIELD: str = "arguments"
    CALL_NODE_TYPE: str = "call_expression"
    STATEMENT_NODE_TYPE: str = "expression_statement"
    INTEGER_LITERAL_TYPE: str = "integer_literal"

    # ── init ─────────────────────────────────────────────────────

    def __init__(
        self,
        state: InstrumentationState,
        hook_path: str = constants.DEFAULT_HOOK_PATH,
    ):
        self._state = state
        self._hook_path = hook_path
        self._sites: list[InstrumentationSite] = []
        self._DISPATCH: dict[str, Callable[[SyntaxNode], None]] = {}

    # ── entry point ──────────────────────────────────────────────

    def transform(self, tree: SyntaxTree) -> list[InstrumentationSite]:
        """Rewrite *tree* in place; return the sites instrumented in it."""
        self._sites = []
        self._visit(tree.root)
        return list(self._sites)

    # ── dispatchers ──────────────────────────────────────────────

    def _visit(self, node: SyntaxNode) -> None:
        handler = self._DISPATCH.get(node.type)
        if handler:
            handler(node)
            return
        self._visit_children(node)

    def _visit_children(self, node: SyntaxNode) -> None:
        for child in list(node.children):
            if child.is_named:
                self._visit(child)

    # ── instrumentation helpers ──────────────────────────────────

    def _instrument(
        self, usage: EnumUsage, shape: InjectionShape, node: SyntaxNode
    ) -> InstrumentationCall | None:
        """Allocate ids for *usage*; ``None`` when suppressed by const context."""
        call = self._state.allocate_call(usage.enum_name, usage.variant_name)
        if call is None:
            logger.debug(
                "Skipping %s at %s: const context", usage.key, node.source_location
            )
            return None
        site = InstrumentationSite(
            call=call,
            enum_name=usage.enum_name,
            variant_name=usage.variant_name,
            shape=shape,
            source_location=node.source_location,
        )
        logger.debug("Instrumented %s", site)
        self._sites.append(site)
        return call

    def _hook_statement(self, call: InstrumentationCall) -> SyntaxNode:
        return syntax.call_statement(self._hook_path, list(call.arguments()))

    def _is_hook_statement(self, node: SyntaxNode | None) -> bool:
        """True for a previously injected ``hook(<int>, <int>);`` statement."""
        if node is None or node.type != self.STATEMENT_NODE_TYPE:
            return False
        call = next(iter(node.named_children), None)
        if call is None or call.type != self.CALL_NODE_TYPE:
            return False
        function = call.child_by_field_name(self.CALL_FUNCTION_FIELD)
        arguments = call.child_by_field_name(self.CALL_ARGUMENTS_FIELD)
        if function is None or arguments is None:
            return False
        if _squash(function.body_text()) != _squash(self._hook_path):
            return False
        args = arguments.named_children
        return len(args) == 2 and all(
            a.type == self.INTEGER_LITERAL_TYPE for a in args
        )


def _squash(text: str) -> str:
    return _WHITESPACE_RE.sub("", text)
