"""Module containing the pipeline running lint passes on tasks."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from logging import debug, warning
from typing import Iterable, List, Type

from autoderef.diagnostics.sink import DiagnosticSink
from autoderef.task import LintTask

from .default import LINT_PASSES
from .stage import LintPass


class LintPipeline:
    """Basic lint pipeline interface."""

    def __init__(self, passes: List[Type[LintPass]]):
        """Generate a new Pipeline based on the given passes"""
        self._passes = passes

    @classmethod
    def from_strings(cls, pass_names: List[str]) -> LintPipeline:
        """Generate a new pipeline composed of the passes referenced by name."""
        name_to_pass = {lint_pass.name: lint_pass for lint_pass in LINT_PASSES}
        passes = []
        for pass_name in pass_names:
            if lint_pass := name_to_pass.get(pass_name):
                passes.append(lint_pass)
            else:
                warning(f'Could not find a LintPass named "{pass_name}"')
        return cls(passes)

    @property
    def passes(self) -> List[Type[LintPass]]:
        return self._passes

    def run(self, task: LintTask):
        """Run all passes on the given task. A failing pass fails the task and stops the pipeline for it."""
        if task.failed:
            return
        for lint_pass in self.passes:
            debug(f"pass {lint_pass.name} on {task.name}")
            instance = lint_pass()
            try:
                instance.run(task)
            except Exception as e:
                task.fail(origin=lint_pass.name, exception=e)
                break

    def run_all(self, tasks: Iterable[LintTask], sink: DiagnosticSink, jobs: int = 1) -> List[LintTask]:
        """Run the pipeline on all tasks, in parallel if more than one job is requested, and collect the findings in the sink."""
        if jobs <= 1:
            return [self._run_task(task, sink) for task in tasks]
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            return list(executor.map(lambda task: self._run_task(task, sink), tasks))

    def _run_task(self, task: LintTask, sink: DiagnosticSink) -> LintTask:
        self.run(task)
        sink.extend(task.diagnostics)
        return task
