"""RustEnumInstrumenter -- injects state hooks around bare enum variants."""

from __future__ import annotations

import logging

from ._base import BaseTransformer
from ..classifier import EnumUsage, classify
from ..model import InjectionShape
from ..state import InstrumentationState
from ..syntax import SyntaxNode
from .. import constants, syntax

logger = logging.getLogger(__name__)


class RustEnumInstrumenter(BaseTransformer):
    """Instruments `let`, assignment and call-argument uses of enum variants.

    Declarations are handled pre-order, so an enum is known to every usage
    visited after it. Inside a block the statement list is rewritten first
    and the block's children are visited afterwards.
    """

    COMMENT_TYPES = frozenset({"line_comment", "block_comment"})

    ATTRIBUTE_TYPE = "attribute_item"

    # Outer attributes are siblings of the statement they apply to.
    STATEMENT_PREFIX_TYPES = COMMENT_TYPES | {ATTRIBUTE_TYPE}

    # `recv.method(..)` and `recv.method::<T>(..)` callees
    METHOD_CALLEE_TYPES = frozenset({"field_expression"})

    CONST_SCOPE_TYPES = frozenset({"const_item", "static_item", "const_block"})

    def __init__(
        self,
        state: InstrumentationState,
        hook_path: str = constants.DEFAULT_HOOK_PATH,
    ):
        super().__init__(state, hook_path)
        self._DISPATCH = {
            "enum_item": self._visit_enum_item,
            "function_item": self._visit_function_item,
            **{t: self._visit_const_scope for t in self.CONST_SCOPE_TYPES},
            "block": self._visit_block,
            "call_expression": self._visit_call_expression,
        }

    # -- declarations ------------------------------------------------------

    def _visit_enum_item(self, node: SyntaxNode) -> None:
        name = node.child_by_field_name("name")
        if name is not None:
            self._state.record_enum(name.body_text())
        self._visit_children(node)

    def _visit_function_item(self, node: SyntaxNode) -> None:
        if _is_const_fn(node):
            self._visit_const_scope(node)
            return
        self._visit_children(node)

    def _visit_const_scope(self, node: SyntaxNode) -> None:
        logger.debug("Const scope %s at %s", node.type, node.source_location)
        with self._state.const_context.scope():
            self._visit_children(node)

    # -- statements --------------------------------------------------------

    def _visit_block(self, node: SyntaxNode) -> None:
        rewritten: list[SyntaxNode] = []
        for stmt in node.children:
            match = self._match_statement(stmt)
            if match is not None:
                run_start, anchor = self._statement_start(rewritten)
                previous = rewritten[run_start - 1] if run_start else None
                if not self._is_hook_statement(previous):
                    usage, shape, value = match
                    call = self._instrument(usage, shape, value)
                    if call is not None:
                        hook = self._hook_statement(call)
                        self._insert_hook(rewritten, anchor, stmt, hook)
            rewritten.append(stmt)
        node.children = rewritten
        self._visit_children(node)

    def _statement_start(self, rewritten: list[SyntaxNode]) -> tuple[int, int]:
        """Locate the attributes and comments sitting directly above a statement.

        Returns the start of that run and the index of its first attribute,
        or ``len(rewritten)`` when the statement carries no attribute.
        """
        run_start = anchor = len(rewritten)
        prefix_types = self.STATEMENT_PREFIX_TYPES
        while run_start and rewritten[run_start - 1].type in prefix_types:
            run_start -= 1
            if rewritten[run_start].type == self.ATTRIBUTE_TYPE:
                anchor = run_start
        return run_start, anchor

    @staticmethod
    def _insert_hook(
        rewritten: list[SyntaxNode], index: int, stmt: SyntaxNode, hook: SyntaxNode
    ) -> None:
        """Lay *hook* out where the statement (or its first attribute) started."""
        first = rewritten[index] if index < len(rewritten) else stmt
        hook.prefix = first.prefix
        # A line comment may own the newline that separated it from the statement.
        follows_newline = index > 0 and rewritten[index - 1].body_text().endswith("\n")
        if follows_newline and "\n" not in first.prefix:
            first.prefix = "\n" + first.prefix
        rewritten.insert(index, hook)

    def _match_statement(
        self, stmt: SyntaxNode
    ) -> tuple[EnumUsage, InjectionShape, SyntaxNode] | None:
        """Classify a block statement as a `let` or assignment of a variant."""
        if stmt.type == "let_declaration":
            value = stmt.child_by_field_name("value")
            shape = InjectionShape.LET
        else:
            expr = stmt
            if stmt.type == "expression_statement":
                expr = next(iter(stmt.named_children), None)
            if expr is None or expr.type != "assignment_expression":
                return None
            value = expr.child_by_field_name("right")
            shape = InjectionShape.ASSIGN
        usage = classify(value, self._state.enum_types)
        if usage is None:
            return None
        return usage, shape, value

    # -- call arguments ----------------------------------------------------

    def _visit_call_expression(self, node: SyntaxNode) -> None:
        arguments = node.child_by_field_name(self.CALL_ARGUMENTS_FIELD)
        if arguments is not None and not self._is_method_call(node):
            for arg in list(arguments.named_children):
                usage = classify(arg, self._state.enum_types)
                if usage is None:
                    continue
                call = self._instrument(usage, InjectionShape.ARGUMENT, arg)
                if call is None:
                    continue
                hook = self._hook_statement(call)
                arguments.wrap_child(
                    arg, lambda original: syntax.scoped_block(hook, original)
                )
        self._visit_children(node)

    def _is_method_call(self, node: SyntaxNode) -> bool:
        callee = node.child_by_field_name(self.CALL_FUNCTION_FIELD)
        if callee is not None and callee.type == "generic_function":
            callee = callee.child_by_field_name(self.CALL_FUNCTION_FIELD)
        return callee is not None and callee.type in self.METHOD_CALLEE_TYPES


def _is_const_fn(node: SyntaxNode) -> bool:
    return any(
        modifier.type == "const"
        for modifiers in node.children_by_type("function_modifiers")
        for modifier in modifiers.children
    )
