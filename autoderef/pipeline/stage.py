"""Module implementing the LintPass interface."""
from abc import ABC, abstractmethod

from autoderef.pipeline.context import LintContext
from autoderef.structures.hir.expressions import Expr
from autoderef.structures.hir.nodes import Body
from autoderef.structures.hir.patterns import Pat
from autoderef.structures.visitors.walker import LintWalker
from autoderef.task import LintTask


class LintPass(ABC):
    """
    Interface for any lint pass.

    A pass is instantiated once per task. Running it walks the item of the task and calls the check functions
    below, which do nothing unless overridden.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the lint pass."""
        pass

    def run(self, task: LintTask):
        """Run the pass on the item of the given task, collecting its findings in the task."""
        if task.item is None:
            raise ValueError(f"Task {task.name} has no item to lint")
        LintWalker(self, LintContext(task)).walk_item(task.item)

    def check_expr(self, cx: LintContext, expr: Expr):
        """Called for every expression before its operands."""

    def check_pat(self, cx: LintContext, pat: Pat):
        """Called for every pattern before its subpatterns."""

    def check_body(self, cx: LintContext, body: Body):
        """Called when the walk enters a body."""

    def check_body_post(self, cx: LintContext, body: Body):
        """Called when the walk of a body, including all nested bodies, is complete."""
