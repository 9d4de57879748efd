"""Module implementing the traversal driving the late lint passes over the bodies of a crate."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from autoderef.structures.hir.expressions import ClosureExpr, Expr
from autoderef.structures.hir.nodes import Body, BodyId, HirNode, Item
from autoderef.structures.hir.patterns import Pat

if TYPE_CHECKING:
    from autoderef.pipeline.context import LintContext
    from autoderef.pipeline.stage import LintPass


class LintWalker:
    """
    Walks the nodes of an item outer to inner, in evaluation order, and notifies a lint pass about each of them.

    Expressions are reported through check_expr, patterns through check_pat. Every body, including the bodies of
    closures, is announced through check_body before its nodes are walked and through check_body_post afterwards.
    The body currently walked is tracked as the enclosing body of the context.
    """

    def __init__(self, lint_pass: LintPass, context: LintContext):
        self._pass = lint_pass
        self._cx = context

    def walk_item(self, item: Item):
        if item.body is not None:
            self.walk_body(item.body)

    def walk_body(self, body: Body):
        previous: Optional[BodyId] = self._cx.enclosing_body
        self._cx.enclosing_body = body.body_id
        self._pass.check_body(self._cx, body)
        for param in body.params:
            self.walk(param)
        self.walk(body.value)
        self._pass.check_body_post(self._cx, body)
        self._cx.enclosing_body = previous

    def walk(self, node: HirNode):
        if isinstance(node, Expr):
            self._pass.check_expr(self._cx, node)
        elif isinstance(node, Pat):
            self._pass.check_pat(self._cx, node)
        if isinstance(node, ClosureExpr):
            if node.body is not None:
                self.walk_body(node.body)
            return
        for child in node:
            self.walk(child)
