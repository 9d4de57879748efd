"""Module implementing the interface for different frontends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from autoderef.task import LintTask
from autoderef.util.options import Options


class Frontend(ABC):
    """Interface for frontends to the linter."""

    @classmethod
    @abstractmethod
    def from_raw(cls, data) -> Frontend:
        """
        Generate a frontend instance directly from the raw data.
        This allows to lint programs which are already loaded, e.g. by a compiler driver.

        data -- The data to be passed to the frontend
        """

    @classmethod
    @abstractmethod
    def from_path(cls, path: str, options: Options) -> Frontend:
        """
        Generate a new frontend with the given path.

        path -- The path to a type checked program whose bodies shall be linted.
        options -- Options to pass to the frontend
        """

    @abstractmethod
    def lift(self, task: LintTask):
        """Lift the item named by the task into the task object."""

    @abstractmethod
    def get_all_body_names(self) -> List[str]:
        """Returns the names of all items owning a body."""
