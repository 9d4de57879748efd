"""Module tracking `ref` bindings to references and how they are used."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from autoderef.diagnostics.diagnostic import Applicability, Diagnostic, Suggestion
from autoderef.diagnostics.lints import Lint
from autoderef.diagnostics.snippets import snippet_with_applicability, snippet_with_context
from autoderef.structures.hir.expressions import Expr, Field, Unary
from autoderef.structures.hir.nodes import Body, BodyId, HirId
from autoderef.structures.hir.patterns import BindingAnnotation, BindingPat
from autoderef.structures.hir.precedence import PREC_POSTFIX
from autoderef.structures.hir.span import Span
from autoderef.structures.hir.ty import Mutability, Ref

if TYPE_CHECKING:
    from autoderef.pipeline.context import LintContext

REF_PATTERN_MESSAGE = "this pattern creates a reference to a reference"


@dataclass
class RefPat:
    """
    A `ref` binding to an immutable reference, collecting the edits needed to drop the `ref`.

    always_deref -- whether every use of the binding is dereferenced, so the binding is a needless borrow
    spans -- the spans of every occurrence of the binding in the alternatives of an or-pattern
    replacements -- the edits removing the `ref` and adapting every use
    """

    always_deref: bool
    spans: List[Span]
    applicability: Applicability
    replacements: List[Tuple[Span, str]] = field(default_factory=list)
    hir_id: Optional[HirId] = None


class RefPatternTracker:
    """
    Collects `ref` bindings of a body and reports them when the walk of the body is complete.

    A binding which can not be rewritten is kept as a tombstone, so further occurrences and uses of it are ignored.
    Bindings are reported in the order they were first seen.
    """

    def __init__(self):
        self._handles: Dict[HirId, int] = {}
        self._table: List[Optional[RefPat]] = []
        self._current_body: Optional[BodyId] = None

    def __len__(self) -> int:
        return len(self._handles)

    def _tombstone(self, binding_id: HirId):
        logging.debug(f"binding {binding_id} can not be rewritten")
        self._table[self._handles[binding_id]] = None

    def _enter_body(self, cx: LintContext):
        """Remember the outermost body a binding was seen in, the bindings are reported once it is complete."""
        if self._current_body is None:
            self._current_body = cx.enclosing_body

    def _insert(self, binding_id: HirId, ref_pat: Optional[RefPat]):
        self._handles[binding_id] = len(self._table)
        self._table.append(ref_pat)

    def check_pat(self, cx: LintContext, pat: BindingPat):
        if pat.annotation is not BindingAnnotation.ref:
            return
        if (handle := self._handles.get(pat.binding_id)) is not None:
            # another alternative of an or-pattern binding the same name
            if (ref_pat := self._table[handle]) is None:
                return
            if pat.span.from_expansion():
                self._tombstone(pat.binding_id)
                return
            ref_pat.spans.append(pat.span)
            snippet = snippet_with_context(cx.source_map, pat.name_span, pat.span.ctxt, "..", ref_pat.applicability)
            ref_pat.applicability = snippet.applicability
            ref_pat.replacements.append((pat.span, snippet.text))
            return
        if pat.span.from_expansion():
            self._enter_body(cx)
            self._insert(pat.binding_id, None)
            return
        ty = cx.typeck.pat_ty(pat)
        # a borrowed &mut T can not be moved out, so only &&T qualifies
        if not (isinstance(ty, Ref) and isinstance(ty.pointee, Ref) and ty.pointee.mutability is Mutability.NOT):
            return
        snippet = snippet_with_context(cx.source_map, pat.name_span, pat.span.ctxt, "..", Applicability.MACHINE_APPLICABLE)
        self._enter_body(cx)
        self._insert(pat.binding_id, RefPat(True, [pat.span], snippet.applicability, [(pat.span, snippet.text)], pat.hir_id))

    def check_local_usage(self, cx: LintContext, expr: Expr, local: HirId):
        """Record the edit a use of a tracked binding needs once the binding holds one reference less."""
        if (handle := self._handles.get(local)) is None or (ref_pat := self._table[handle]) is None:
            return
        adjustments = cx.typeck.expr_adjustments(expr)
        if len(adjustments) >= 2 and adjustments[0].is_deref and adjustments[1].is_deref:
            # auto-deref removes both references anyway
            return
        parent = cx.hir.get_parent_expr(expr.hir_id)
        if isinstance(parent, Field):
            return
        if isinstance(parent, Unary) and parent.is_deref and not parent.span.from_expansion():
            snippet = snippet_with_context(cx.source_map, expr.span, parent.span.ctxt, "..", ref_pat.applicability)
            ref_pat.applicability = snippet.applicability
            ref_pat.replacements.append((parent.span, snippet.text))
        elif parent is not None and not parent.span.from_expansion():
            if parent.precedence() == PREC_POSTFIX:
                # `&x.foo()` would need parentheses
                self._tombstone(local)
                return
            ref_pat.always_deref = False
            snippet = snippet_with_context(cx.source_map, expr.span, parent.span.ctxt, "..", ref_pat.applicability)
            ref_pat.applicability = snippet.applicability
            ref_pat.replacements.append((expr.span, f"&{snippet.text}"))
        elif not expr.span.from_expansion():
            ref_pat.always_deref = False
            text, ref_pat.applicability = snippet_with_applicability(cx.source_map, expr.span, "..", ref_pat.applicability)
            ref_pat.replacements.append((expr.span, f"&{text}"))
        else:
            # the identifier was produced by a macro and does not match the context of the binding
            self._tombstone(local)

    def flush(self, cx: LintContext, body: Body):
        """Report all bindings once the body they were first seen in is complete."""
        if self._current_body is None or self._current_body != body.body_id:
            return
        for ref_pat in self._table:
            if ref_pat is None:
                continue
            lint = Lint.NEEDLESS_BORROW if ref_pat.always_deref else Lint.REF_BINDING_TO_REFERENCE
            cx.emit(
                Diagnostic(
                    lint,
                    ref_pat.hir_id,
                    list(ref_pat.spans),
                    REF_PATTERN_MESSAGE,
                    [Suggestion("try this", list(ref_pat.replacements), ref_pat.applicability)],
                )
            )
        self.clear()

    def clear(self):
        self._handles.clear()
        self._table.clear()
        self._current_body = None
