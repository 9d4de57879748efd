"""Module describing tasks to be handled by the lint pipeline."""

from dataclasses import dataclass, field
from logging import error
from typing import List, Optional

from autoderef.diagnostics.diagnostic import Diagnostic
from autoderef.structures.crate import Crate
from autoderef.structures.hir.nodes import Item
from autoderef.util.options import Options


# We set eq=False, so that tasks are only equal when they are the very same instance
@dataclass(eq=False)
class LintTask:
    """Represents a task for the lint pipeline: one item of a crate, together with the findings on it."""

    name: str
    options: Options = field(default_factory=Options.load_default_options)
    crate: Optional[Crate] = None
    item: Optional[Item] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    _failure_origin: Optional[str] = field(default=None, init=False)

    def fail(self, origin: str = "", exception: Optional[Exception] = None):
        """Sets the task to be failed by setting the failure origin."""
        if self.failure_origin is not None:
            raise RuntimeError("Tried failing already failed task")

        self._failure_origin = origin
        error(f"Failed to lint {self.name}, error during pass {origin}: {exception}")

    @property
    def failed(self) -> bool:
        """
        Returns True if an error occurred during linting.
        The findings of a failed task may be incomplete.
        """
        return self._failure_origin is not None

    @property
    def failure_origin(self) -> Optional[str]:
        return self._failure_origin
