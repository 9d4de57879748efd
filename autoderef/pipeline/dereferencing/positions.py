"""Checks on the position an expression is used in, judged by its parent node."""
from typing import Optional

from autoderef.structures.hir.expressions import Call, ErrExpr, Expr, Field, Index, Match, MatchSource, MethodCall, Unary
from autoderef.structures.hir.nodes import HirId, HirNode, Local
from autoderef.structures.hir.span import Span


def is_linted_explicit_deref_position(parent: Optional[HirNode], child_id: HirId, child_span: Span) -> bool:
    """Check whether a deref method call at this position can be switched to the deref operator."""
    if not isinstance(parent, Expr) or parent.span.ctxt != child_span.ctxt:
        return True
    # deref calls in the middle of a method chain, e.g. x.deref().foo()
    if isinstance(parent, MethodCall):
        return parent.receiver.hir_id != child_id
    # deref calls resulting in a called function, e.g. (x.deref())()
    if isinstance(parent, Call):
        return parent.func.hir_id != child_id
    # *x.deref() would become *&*x
    if isinstance(parent, Unary) and parent.is_deref:
        return False
    # postfix expressions would require parentheses
    if isinstance(parent, Match) and parent.source is not MatchSource.normal:
        return False
    return not isinstance(parent, (Field, Index, ErrExpr))


def is_auto_reborrow_position(parent: Optional[HirNode]) -> bool:
    """Check whether the compiler reborrows a reference at this position. Only correct if auto-deref already occurs there."""
    return isinstance(parent, (MethodCall, Call, Local))


def is_auto_borrow_position(parent: Optional[HirNode], child_id: HirId) -> bool:
    """Check whether the compiler borrows a value at this position."""
    if isinstance(parent, Field):
        return True
    if isinstance(parent, Call):
        return parent.func.hir_id == child_id
    return False
