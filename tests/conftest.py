from typing import Callable, Dict, Optional

import pytest
from autoderef.pipeline.pipeline import LintPipeline
from autoderef.structures.builder import HirBuilder
from autoderef.structures.crate import Crate
from autoderef.task import LintTask
from autoderef.util.options import Options


def lint_item(crate: Crate, name: str = "main", settings: Optional[Dict] = None) -> LintTask:
    """Run the default lint passes on the named item of the crate and return the task holding the findings."""
    options = Options.load_default_options()
    for key, value in (settings or {}).items():
        options.set(key, value)
    task = LintTask(name, options, crate, crate.get_item(name))
    LintPipeline.from_strings(options.getlist("pipeline.lint_passes")).run(task)
    return task


@pytest.fixture
def builder() -> HirBuilder:
    return HirBuilder("tests")


@pytest.fixture
def lint() -> Callable[..., LintTask]:
    return lint_item


@pytest.fixture
def crate_description() -> Dict:
    """A crate with `fn main(y: &u32) { fun(&y); }`, where the borrow is reborrowed implicitly, and a helper without findings."""
    borrow = {
        "kind": "addr_of",
        "operand": {"kind": "local", "binding": "y"},
        "adjustments": [{"kind": "deref", "target": "&u32"}, {"kind": "deref", "target": "u32"}, {"kind": "borrow", "target": "&u32"}],
    }
    return {
        "name": "sample",
        "defs": [{"kind": "fn_def", "path": "fun", "inputs": ["&u32"], "output": "u32"}],
        "items": [
            {
                "kind": "fn",
                "name": "main",
                "params": [{"pat": {"kind": "bind", "name": "y", "ty": "&u32"}, "ty": "&u32"}],
                "body": {"kind": "block", "stmts": [{"kind": "stmt", "expr": {"kind": "call", "func": {"kind": "path", "name": "fun"}, "args": [borrow]}}]},
            },
            {"kind": "const", "name": "LIMIT", "ty": "u32", "value": {"kind": "lit", "value": 3, "ty": "u32"}},
        ],
    }
