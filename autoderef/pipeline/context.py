"""Module implementing the context handed to lint passes while walking an item."""
from __future__ import annotations

from logging import debug
from typing import Optional, Set

from autoderef.diagnostics.diagnostic import Diagnostic
from autoderef.diagnostics.lints import Lint
from autoderef.structures.crate import Crate
from autoderef.structures.hir.nodes import BodyId, HirId
from autoderef.structures.hirmap import HirMap
from autoderef.structures.source_map import SourceMap
from autoderef.structures.typeck import TypeckResults
from autoderef.task import LintTask
from autoderef.util.options import Options


class LintContext:
    """Gives lint passes access to the crate of a task and collects their findings."""

    def __init__(self, task: LintTask):
        if task.crate is None:
            raise ValueError(f"Task {task.name} has not been lifted")
        self._task = task
        self.enclosing_body: Optional[BodyId] = None
        self._allowed_lints: Set[Lint] = set()
        for name in task.options.getlist("dereferencing.allowed_lints", fallback=[]):
            if (lint := Lint.from_name(name)) is None:
                debug(f"ignoring unknown lint {name} in the allowed lints")
                continue
            self._allowed_lints.add(lint)

    @property
    def tcx(self) -> Crate:
        return self._task.crate

    @property
    def typeck(self) -> TypeckResults:
        return self._task.crate.typeck

    @property
    def hir(self) -> HirMap:
        return self._task.crate.hir

    @property
    def source_map(self) -> SourceMap:
        return self._task.crate.source_map

    @property
    def options(self) -> Options:
        return self._task.options

    def is_lint_allowed(self, lint: Lint, hir_id: HirId) -> bool:
        """Check whether the lint is allowed by the configuration or by an attribute at the node."""
        return lint in self._allowed_lints or self.tcx.is_lint_allowed(lint, hir_id)

    def emit(self, diagnostic: Diagnostic):
        """Report a finding, unless its lint is allowed at the node it is anchored at."""
        if self.is_lint_allowed(diagnostic.lint, diagnostic.hir_id):
            debug(f"{diagnostic.lint} is allowed at {diagnostic.hir_id}, dropping finding")
            return
        debug(f"{diagnostic.lint} at {diagnostic.span}: {diagnostic.message}")
        self._task.diagnostics.append(diagnostic)
