#!/usr/bin/env python3
"""Main linter Interface."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, List, Optional, Tuple

from autoderef.diagnostics.diagnostic import Diagnostic
from autoderef.diagnostics.sink import DiagnosticSink
from autoderef.frontend import Frontend, JsonFrontend
from autoderef.pipeline.pipeline import LintPipeline
from autoderef.structures.source_map import SourceMap
from autoderef.task import LintTask
from autoderef.util.options import Options


class Linter:
    """Main Interface to the linter."""

    def __init__(self, frontend: Frontend):
        """
        Initialize a new linter on the given program.

        frontend -- The frontend providing the type checked program.
        """
        self._frontend = frontend

    @classmethod
    def create_options(cls) -> Options:
        """Create Options from defaults"""
        return Options.load_default_options()

    @classmethod
    def from_path(cls, path: str, options: Optional[Options] = None, frontend: Frontend = JsonFrontend) -> Linter:
        """Create a linter instance by invoking the given frontend on the given file."""
        if not options:
            options = Linter.create_options()
        return cls(frontend.from_path(path, options))

    @classmethod
    def from_raw(cls, data, frontend: Frontend = JsonFrontend) -> Linter:
        """Create a linter instance from data the frontend understands, e.g. a decoded JSON description."""
        return cls(frontend.from_raw(data))

    @property
    def source_map(self) -> Optional[SourceMap]:
        crate = getattr(self._frontend, "crate", None)
        return None if crate is None else crate.source_map

    def lint_all(self, item_names: Collection[str] | None = None, task_options: Options | None = None) -> Result:
        """
        Lint a collection of items specified by their names.

        :param item_names: The names of the items to lint. If None, lints all items owning a body.
        :param task_options: Options for the lint tasks. If None, default options are used.
        :return: A Result object containing the tasks and their findings, grouped per task.
        """
        if item_names is None:
            item_names = self._frontend.get_all_body_names()
        if task_options is None:
            task_options = Linter.create_options()

        pipeline = LintPipeline.from_strings(task_options.getlist("pipeline.lint_passes"))

        tasks = []
        for name in item_names:
            task = LintTask(str(name), task_options)
            tasks.append(task)
            self._frontend.lift(task)

        sink = DiagnosticSink()
        pipeline.run_all(tasks, sink, jobs=task_options.getint("pipeline.jobs", fallback=1))
        return Linter.Result(tasks, list(sink))

    def lint(self, item_name: str, task_options: Options | None = None) -> Tuple[LintTask, List[Diagnostic]]:
        """
        Lint a specific item specified by its name.
        This method serves as a shorthand for linting a single item and simply delegates to lint_all.

        :param item_name: The name of the item to lint.
        :param task_options: Options for the lint task. If None, default options are used.
        :return: A tuple containing the LintTask object and its findings.
        """
        result = self.lint_all([item_name], task_options)
        return result.tasks[0], result.diagnostics

    @dataclass
    class Result:
        tasks: List[LintTask]
        diagnostics: List[Diagnostic]


"""When invoked as a script, run the commandline interface."""
if __name__ == "__main__":
    from autoderef.util.commandline import main

    raise SystemExit(main(Linter))
