"""Module turning finished chains into findings with their suggested replacements."""
from __future__ import annotations

from typing import TYPE_CHECKING

from autoderef.diagnostics.diagnostic import Applicability, Diagnostic, Suggestion
from autoderef.diagnostics.lints import Lint
from autoderef.diagnostics.snippets import has_enclosing_paren, snippet_with_context
from autoderef.structures.hir.expressions import Expr
from autoderef.structures.hir.precedence import PREC_PREFIX
from autoderef.structures.hir.ty import Mutability, Ref, peel_refs

from .states import Borrow, ChainAnchor, ChainState, DerefedBorrow, DerefMethodChain, ExplicitDeref, Reborrow

if TYPE_CHECKING:
    from autoderef.pipeline.context import LintContext

DEREF_METHOD_MESSAGES = {
    Mutability.NOT: "explicit `deref` method call",
    Mutability.MUT: "explicit `deref_mut` method call",
}
EXPLICIT_DEREF_MESSAGE = "deref which would be done by auto-deref"


def report(cx: LintContext, expr: Expr, state: ChainState, anchor: ChainAnchor):
    """Report the chain anchored at the given expression, with expr being the expression the chain ended at."""
    if isinstance(state, DerefMethodChain):
        cx.emit(_deref_method_finding(cx, expr, state, anchor))
    elif isinstance(state, DerefedBorrow):
        cx.emit(_needless_borrow_finding(cx, expr, state, anchor))
    elif isinstance(state, ExplicitDeref):
        cx.emit(_explicit_deref_finding(cx, expr, state, anchor))
    elif not isinstance(state, (Borrow, Reborrow)):
        raise TypeError(f"Unknown chain state {state}")


def _deref_method_finding(cx: LintContext, expr: Expr, state: DerefMethodChain, anchor: ChainAnchor) -> Diagnostic:
    """
    Replace the calls by operators.

    A call which changes the type of a reference needs two dereferences the first time this happens,
    one to remove the reference and one to call the deref implementation.
    """
    snippet = snippet_with_context(cx.source_map, expr.span, anchor.span.ctxt, "..", Applicability.MACHINE_APPLICABLE)
    ty = cx.typeck.expr_ty(expr)
    _, ref_count = peel_refs(ty)
    changed = state.ty_changed_count
    if changed >= ref_count and ref_count != 0:
        deref = "*" * (changed + 1)
    else:
        deref = "*" * changed
    if changed < ref_count:
        # a &mut T needs a reborrow to become a &T
        addr_of = "&*" if state.mutability is Mutability.NOT and isinstance(ty, Ref) and ty.mutability is Mutability.MUT else ""
    else:
        addr_of = "&mut " if state.mutability is Mutability.MUT else "&"
    text = snippet.text
    if not snippet.is_macro_call and state.is_final_call_form and expr.precedence() < PREC_PREFIX:
        text = f"({text})"
    return Diagnostic(
        Lint.EXPLICIT_DEREF_METHODS,
        anchor.hir_id,
        [anchor.span],
        DEREF_METHOD_MESSAGES[state.mutability],
        [Suggestion("try this", [(anchor.span, f"{addr_of}{deref}{text}")], snippet.applicability)],
    )


def _needless_borrow_finding(cx: LintContext, expr: Expr, state: DerefedBorrow, anchor: ChainAnchor) -> Diagnostic:
    snippet = snippet_with_context(cx.source_map, expr.span, anchor.span.ctxt, "..", Applicability.MACHINE_APPLICABLE)
    text = snippet.text
    if state.required_precedence > expr.precedence() and not has_enclosing_paren(text):
        text = f"({text})"
    return Diagnostic(
        Lint.NEEDLESS_BORROW,
        anchor.hir_id,
        [anchor.span],
        state.message,
        [Suggestion("change this to", [(anchor.span, text)], snippet.applicability)],
    )


def _explicit_deref_finding(cx: LintContext, expr: Expr, state: ExplicitDeref, anchor: ChainAnchor) -> Diagnostic:
    """A reference is passed through as is, so the whole borrow goes. Otherwise only the dereference is removed."""
    if cx.typeck.expr_ty(expr).is_ref:
        span, hir_id = anchor.span, anchor.hir_id
    else:
        span, hir_id = state.deref_span, state.deref_hir_id
    snippet = snippet_with_context(cx.source_map, expr.span, span.ctxt, "..", Applicability.MACHINE_APPLICABLE)
    return Diagnostic(
        Lint.EXPLICIT_AUTO_DEREF,
        hir_id,
        [span],
        EXPLICIT_DEREF_MESSAGE,
        [Suggestion("try this", [(span, snippet.text)], snippet.applicability)],
    )
