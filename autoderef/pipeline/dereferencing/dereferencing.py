"""Module implementing the lint pass for redundant references and dereferences."""
from autoderef.pipeline.context import LintContext
from autoderef.pipeline.stage import LintPass
from autoderef.structures.hir.expressions import Expr, path_to_local
from autoderef.structures.hir.nodes import Body
from autoderef.structures.hir.patterns import BindingPat, Pat
from autoderef.task import LintTask

from .chain import ChainStateMachine
from .ref_patterns import RefPatternTracker


class Dereferencing(LintPass):
    """
    Finds references and dereferences the compiler would insert or remove by itself:

    explicit_deref_methods -- `x.deref()` where `&*x` does the same
    needless_borrow -- `&x` which is immediately dereferenced again, and `ref x` bindings only ever dereferenced
    ref_binding_to_reference -- `ref x` bindings to a reference
    explicit_auto_deref -- `*x` where auto-deref would dereference anyway
    """

    name = "dereferencing"

    def __init__(self):
        self._chain = ChainStateMachine()
        self._ref_patterns = RefPatternTracker()
        self._lint_ref_patterns = True

    def run(self, task: LintTask):
        self._lint_ref_patterns = task.options.getboolean("dereferencing.lint_ref_patterns", fallback=True)
        super().run(task)

    def check_expr(self, cx: LintContext, expr: Expr):
        if self._chain.skips(expr):
            return
        if self._lint_ref_patterns and (local := path_to_local(expr)) is not None:
            self._ref_patterns.check_local_usage(cx, expr, local)
        self._chain.check_expr(cx, expr)

    def check_pat(self, cx: LintContext, pat: Pat):
        if self._lint_ref_patterns and isinstance(pat, BindingPat):
            self._ref_patterns.check_pat(cx, pat)

    def check_body(self, cx: LintContext, body: Body):
        self._chain.reset(body)

    def check_body_post(self, cx: LintContext, body: Body):
        self._chain.reset(body)
        self._ref_patterns.flush(cx, body)
