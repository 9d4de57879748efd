"""Module implementing the state machine following chains of reference operations from the outside in."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Tuple

from autoderef.diagnostics.lints import Lint
from autoderef.structures.hir.expressions import Call, Expr
from autoderef.structures.hir.nodes import Body, HirId
from autoderef.structures.hir.ty import Ty

from .positions import is_linted_explicit_deref_position
from .refop import RefOp, try_parse_ref_op
from .stability import count_implicit_derefs, find_adjustments, is_stable_auto_deref_position, required_references
from .states import Borrow, ChainAnchor, ChainState, DerefedBorrow, DerefMethodChain, ExplicitDeref, Reborrow
from .suggestions import report

if TYPE_CHECKING:
    from autoderef.pipeline.context import LintContext


def deref_method_same_type(result_ty: Ty, arg_ty: Ty) -> bool:
    """Check whether a deref call only removed a reference, e.g. `&T` to `&T` through `impl Deref for &T`."""
    return result_ty.is_ref and arg_ty.is_ref and result_ty.pointee == arg_ty.pointee


class ChainStateMachine:
    """
    Tracks the chain of nested reference operations currently walked.

    Expressions are seen outer to inner. The outermost operation of a chain opens it, every nested operation
    advances it, and the first expression which does not continue the chain finishes it and reports the result.
    That expression may then open a chain of its own.
    """

    def __init__(self):
        self._state: Optional[Tuple[ChainState, ChainAnchor]] = None
        # the callee path of `Deref::deref(x)`, which must not end the chain
        self._skip_expr: Optional[HirId] = None

    @property
    def is_open(self) -> bool:
        return self._state is not None

    def skips(self, expr: Expr) -> bool:
        """Check whether the expression is the callee of a call-form deref step and clear the mark."""
        if self._skip_expr is not None and self._skip_expr == expr.hir_id:
            self._skip_expr = None
            return True
        return False

    def check_expr(self, cx: LintContext, expr: Expr):
        """Advance the chain with the next expression of the walk."""
        if expr.span.from_expansion():
            self._finish(cx, expr)
            return
        if (ref_op := try_parse_ref_op(cx.tcx, expr)) is None:
            self._finish(cx, expr)
            return
        if self._state is None:
            self._open(cx, expr, ref_op)
        elif not self._advance(cx, expr, ref_op):
            self._finish(cx, expr)
            self._open(cx, expr, ref_op)

    def _finish(self, cx: LintContext, expr: Expr):
        if self._state is not None:
            state, anchor = self._state
            self._state = None
            report(cx, expr, state, anchor)

    def _open(self, cx: LintContext, expr: Expr, ref_op: RefOp):
        anchor = ChainAnchor(expr.span, expr.hir_id)
        parent = cx.hir.parent(expr.hir_id)
        if ref_op.is_method:
            if cx.is_lint_allowed(Lint.EXPLICIT_DEREF_METHODS, expr.hir_id):
                return
            if not is_linted_explicit_deref_position(parent, expr.hir_id, expr.span):
                return
            changed = 0 if deref_method_same_type(cx.typeck.expr_ty(expr), cx.typeck.expr_ty(ref_op.operand)) else 1
            self._state = DerefMethodChain(changed, self._mark_call_form(expr), ref_op.mutability), anchor
        elif ref_op.is_addr_of:
            deref_count, next_adjustment = count_implicit_derefs(find_adjustments(cx.tcx, expr))
            required = required_references(parent, expr.hir_id, deref_count, next_adjustment)
            if deref_count >= required.count:
                self._state = DerefedBorrow(deref_count - required.count, required.precedence, required.message), anchor
            elif is_stable_auto_deref_position(cx, expr):
                self._state = Borrow(), anchor

    def _advance(self, cx: LintContext, expr: Expr, ref_op: RefOp) -> bool:
        """Try to continue the open chain with the given operation, returning whether it did."""
        state, anchor = self._state
        if isinstance(state, DerefMethodChain) and ref_op.is_method:
            changed = 0 if deref_method_same_type(cx.typeck.expr_ty(expr), cx.typeck.expr_ty(ref_op.operand)) else 1
            self._state = DerefMethodChain(state.ty_changed_count + changed, self._mark_call_form(expr), state.mutability), anchor
            return True
        if isinstance(state, DerefedBorrow) and state.remaining != 0 and ref_op.is_addr_of:
            self._state = DerefedBorrow(state.remaining - 1, state.required_precedence, state.message), anchor
            return True
        if isinstance(state, Borrow) and ref_op.is_deref:
            if cx.typeck.expr_ty(ref_op.operand).is_ref:
                self._state = Reborrow(expr.span, expr.hir_id), anchor
            else:
                self._state = ExplicitDeref(expr.span, expr.hir_id), anchor
            return True
        if isinstance(state, Reborrow) and ref_op.is_deref:
            self._state = ExplicitDeref(state.deref_span, state.deref_hir_id), anchor
            return True
        if isinstance(state, ExplicitDeref) and ref_op.is_deref:
            return True
        return False

    def _mark_call_form(self, expr: Expr) -> bool:
        if isinstance(expr, Call):
            self._skip_expr = expr.func.hir_id
            return True
        return False

    def reset(self, body: Body):
        """Drop any chain left open when a body starts or ends."""
        if self._state is not None:
            logging.debug(f"discarding chain {self._state[0]} left open at body {body.body_id}")
        self._state = None
        self._skip_expr = None
