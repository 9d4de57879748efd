"""Class implementing the frontend reading type checked programs from JSON."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from autoderef.structures.crate import Crate
from autoderef.task import LintTask
from autoderef.util.options import Options

from ..frontend import Frontend
from .lifter import JsonLifter


class JsonFrontend(Frontend):
    """
    Frontend implementation for JSON descriptions of type checked programs.

    The description is an object with the name of the crate, the definitions the program refers to (defs)
    and the items owning bodies (items), each being an object tagged with its kind.
    """

    def __init__(self, crate: Crate):
        self._crate = crate

    @classmethod
    def from_path(cls, path: str, options: Options) -> JsonFrontend:
        """Create a frontend object from the JSON file at the given path."""
        with open(path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path} is not a valid JSON file: {e}") from e
        return cls.from_raw(data)

    @classmethod
    def from_raw(cls, data: Dict[str, Any]) -> JsonFrontend:
        """Create a frontend instance from an already decoded description."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object describing a crate, got {type(data).__name__}")
        lifter = JsonLifter()
        lifter.builder.crate.name = data.get("name", "crate")
        try:
            lifter.lift_all(data.get("defs", []))
            lifter.lift_all(data.get("items", []))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed crate description: {e!r}") from e
        return cls(lifter.builder.finish())

    @property
    def crate(self) -> Crate:
        return self._crate

    def lift(self, task: LintTask):
        """
        Lift the item named by the task into it.
        All tasks share the crate, which the lint passes only read.
        """
        if task.failed:
            return
        if (item := self._crate.get_item(task.name)) is None:
            task.fail("Item lifting", ValueError(f"No item named {task.name} in crate {self._crate.name}"))
            return
        logging.debug(f"lifted {task.name} from {self._crate!r}")
        task.crate = self._crate
        task.item = item

    def get_all_body_names(self) -> List[str]:
        """Returns the names of all items owning a body."""
        return [item.name for item in self._crate.items if item.body is not None]
