"""Module implementing the JsonLifter of the JSON frontend."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from autoderef.diagnostics.lints import Lint
from autoderef.frontend.lifter import ObserverLifter
from autoderef.structures.builder import HirBuilder
from autoderef.structures.crate import DEREF_METHOD_PATHS
from autoderef.structures.hir.adjustment import Adjustment
from autoderef.structures.hir.expressions import Expr
from autoderef.structures.hir.nodes import DefId, HirId, HirNode
from autoderef.structures.hir.patterns import BindingPat
from autoderef.structures.hir.ty import Mutability, Ty

from .handlers import HANDLERS

DEREF_MUT_METHOD_PATHS = frozenset({"core::ops::DerefMut::deref_mut", "core::ops::deref::DerefMut::deref_mut", "std::ops::DerefMut::deref_mut"})


class JsonLifter(ObserverLifter):
    """
    Lifter converting JSON objects into nodes of a crate, built bottom-up through a HirBuilder.

    Every object carries its kind. Expressions may additionally carry their type (ty), their adjustments,
    the macro they were expanded from (macro), whether they are an argument of the enclosing macro (macro_arg)
    and lints allowed on them (allow). Bindings and break targets are referred to by labels.
    """

    def __init__(self, builder: Optional[HirBuilder] = None):
        super().__init__()
        self.builder = HirBuilder() if builder is None else builder
        self.generics: Tuple[str, ...] = ()
        self._bindings: Dict[str, BindingPat] = {}
        self._targets: Dict[str, HirId] = {}
        self._defs: Dict[str, DefId] = {}
        for handler in HANDLERS:
            handler(self).register()

    def kind_of(self, data) -> str:
        if not isinstance(data, dict) or not isinstance(data.get("kind"), str):
            raise ValueError(f"Expected an object with a kind, got {data!r}")
        return data["kind"]

    def lift(self, data, **kwargs):
        """Lift the given object and apply the annotations shared by all nodes."""
        node = super().lift(data, **kwargs)
        if isinstance(node, HirNode):
            self._annotate(node, data)
        return node

    def lift_unknown(self, data, **kwargs):
        raise ValueError(f"Can not lift objects of kind {data['kind']}")

    def lift_all(self, items: Iterable[Dict[str, Any]]) -> List:
        return [self.lift(item) for item in items]

    def lift_optional(self, data: Optional[Dict[str, Any]]):
        return None if data is None else self.lift(data)

    @staticmethod
    def mutability(data: Dict[str, Any]) -> Mutability:
        return Mutability.MUT if data.get("mut", False) else Mutability.NOT

    def ty(self, text: Optional[str]) -> Optional[Ty]:
        """Parse a type in the generic context of the item currently lifted."""
        if text is None:
            return None
        if not isinstance(text, str):
            raise ValueError(f"Expected a type string, got {text!r}")
        return self.builder.ty(text, self.generics)

    def _annotate(self, node: HirNode, data: Dict[str, Any]):
        if isinstance(node, Expr) and (adjustments := data.get("adjustments")):
            self.builder.adjust(node, *(self.lift_adjustment(adjustment) for adjustment in adjustments))
        if (macro_name := data.get("macro")) is not None:
            self.builder.expand(node, macro_name)
        if data.get("macro_arg", False):
            self.builder.macro_arg(node)
        for name in data.get("allow", ()):
            if (lint := Lint.from_name(name)) is None:
                raise ValueError(f"Unknown lint {name}")
            self.builder.allow(node, lint)

    def lift_adjustment(self, data: Dict[str, Any]) -> Adjustment:
        target = self.ty(data.get("target"))
        if target is None:
            raise ValueError(f"Adjustment {data!r} has no target type")
        kind = data.get("kind")
        if kind == "deref":
            overloaded = data.get("overloaded")
            if overloaded is None:
                return Adjustment.deref(target)
            return Adjustment.deref(target, Mutability.MUT if overloaded == "mut" else Mutability.NOT)
        if kind == "borrow":
            return Adjustment.borrow(target, self.mutability(data))
        if kind == "borrow_raw":
            return Adjustment.borrow_raw(target, self.mutability(data))
        if kind == "never_to_any":
            return Adjustment.never_to_any(target)
        if kind == "pointer":
            return Adjustment.pointer(target)
        raise ValueError(f"Unknown adjustment kind {kind}")

    # labels

    def declare_binding(self, label: str, binding: BindingPat):
        self._bindings[label] = binding

    def binding(self, label: str) -> BindingPat:
        if (binding := self._bindings.get(label)) is None:
            raise ValueError(f"Use of undeclared binding {label}")
        return binding

    def target(self, label: Optional[str]) -> Optional[HirId]:
        """Return the identity reserved for the labelled block or loop, reserving it on first use."""
        if label is None:
            return None
        if label not in self._targets:
            self._targets[label] = self.builder.new_id()
        return self._targets[label]

    def declare_def(self, path: str, def_id: DefId):
        self._defs[path] = def_id

    def def_id(self, path: Optional[str]) -> Optional[DefId]:
        """Resolve a definition by path. The deref methods are always known."""
        if path is None:
            return None
        if path in self._defs:
            return self._defs[path]
        if path in DEREF_METHOD_PATHS:
            return self.builder.deref_method
        if path in DEREF_MUT_METHOD_PATHS:
            return self.builder.deref_mut_method
        raise ValueError(f"Reference to undeclared definition {path}")

    def reset_scope(self, generics: Iterable[str] = ()):
        """Start lifting a new item. Bindings and labels do not cross item boundaries."""
        self.generics = tuple(generics)
        self._bindings.clear()
        self._targets.clear()
