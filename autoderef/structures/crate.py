"""Module implementing the crate context: definitions, signatures, bodies and lint levels of a type checked program."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Optional, Set, Tuple

from autoderef.diagnostics.lints import Lint
from autoderef.structures.hir.expressions import ClosureExpr, Expr, PathExpr
from autoderef.structures.hir.hir_ty import HirTy
from autoderef.structures.hir.nodes import Body, BodyId, DefId, FnDecl, HirId, Item
from autoderef.structures.hir.ty import Closure, FnDef, FnPtr, Ty, peel_refs
from autoderef.structures.hirmap import HirMap
from autoderef.structures.source_map import SourceMap
from autoderef.structures.typeck import TypeckResults

DEREF_METHOD_PATHS = frozenset({"core::ops::Deref::deref", "core::ops::deref::Deref::deref", "std::ops::Deref::deref"})
DEREF_MUT_TRAIT_PATHS = frozenset({"core::ops::DerefMut", "core::ops::deref::DerefMut", "std::ops::DerefMut"})


class DefKind(Enum):
    fn = auto()
    assoc_fn = auto()
    ctor = auto()
    closure = auto()
    struct = auto()
    variant = auto()
    static = auto()
    const = auto()

    @property
    def is_fn_like(self) -> bool:
        """Check whether a path to a definition of this kind can be called with a signature of its own."""
        return self in (DefKind.fn, DefKind.assoc_fn, DefKind.ctor)


@dataclass(frozen=True)
class FnSig:
    """The resolved signature of a function. Methods list their receiver as the first input."""

    inputs: Tuple[Ty, ...]
    output: Ty

    def __str__(self) -> str:
        return f"fn({', '.join(str(ty) for ty in self.inputs)}) -> {self.output}"


@dataclass
class DefInfo:
    """
    A definition the program refers to.

    path -- the full path of the definition, e.g. core::ops::Deref::deref
    trait_path -- the path of the trait an associated function belongs to
    sig -- the signature of functions, constructors and closures
    decl -- the signature as written, only known for closures
    fields -- the field types of structs and enum variants
    """

    def_id: DefId
    path: str
    kind: DefKind
    trait_path: Optional[str] = None
    sig: Optional[FnSig] = None
    decl: Optional[FnDecl] = None
    fields: Dict[str, Ty] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.path.rsplit("::", 1)[-1]


@dataclass(frozen=True)
class ExprSig:
    """The signature of a callee expression, with the written parameter types where the callee is a closure."""

    sig: FnSig
    decl: Optional[FnDecl] = None

    def input_with_hir(self, index: int) -> Optional[Tuple[Optional[HirTy], Ty]]:
        """Return the written and the resolved type of the parameter at the given position."""
        if index >= len(self.sig.inputs):
            return None
        hir_ty = None
        if self.decl is not None and index < len(self.decl.inputs):
            hir_ty = self.decl.inputs[index]
        return hir_ty, self.sig.inputs[index]


class Crate:
    """All information about a type checked program the lint passes can query."""

    def __init__(self, name: str = "crate"):
        self.name = name
        self.hir = HirMap()
        self.typeck = TypeckResults()
        self.source_map = SourceMap()
        self._defs: Dict[DefId, DefInfo] = {}
        self._items: List[Item] = []
        self._bodies: Dict[BodyId, Body] = {}
        self._diagnostic_items: Dict[str, DefId] = {}
        self._deref_mut_traits: Set[str] = set(DEREF_MUT_TRAIT_PATHS)
        self._allowed_lints: Dict[HirId, Set[Lint]] = {}

    def __repr__(self) -> str:
        return f"Crate({self.name}, {len(self._items)} items)"

    @property
    def items(self) -> List[Item]:
        return self._items

    def iter_bodies(self) -> Iterator[Body]:
        yield from self._bodies.values()

    def add_def(self, info: DefInfo):
        """Register a definition. The deref method is registered as a diagnostic item automatically."""
        self._defs[info.def_id] = info
        if info.path in DEREF_METHOD_PATHS:
            self._diagnostic_items["deref_method"] = info.def_id

    def add_item(self, item: Item):
        """Register an item together with all bodies nested in it."""
        self._items.append(item)
        self.hir.insert_tree(item)
        for node in item.descendants():
            if isinstance(node, (Item, ClosureExpr)) and node.body is not None:
                self._bodies[node.body.body_id] = node.body

    def get_item(self, name: str) -> Optional[Item]:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def def_info(self, def_id: Optional[DefId]) -> Optional[DefInfo]:
        if def_id is None:
            return None
        return self._defs.get(def_id)

    def body(self, body_id: BodyId) -> Optional[Body]:
        return self._bodies.get(body_id)

    def allow_lint(self, hir_id: HirId, lint: Lint):
        """Attach an allow attribute for the given lint to a node. It applies to all nested nodes."""
        self._allowed_lints.setdefault(hir_id, set()).add(lint)

    def is_lint_allowed(self, lint: Lint, hir_id: HirId) -> bool:
        """Check whether the node or any of its ancestors allows the given lint."""
        if lint in self._allowed_lints.get(hir_id, ()):
            return True
        return any(lint in self._allowed_lints.get(parent_id, ()) for parent_id, _ in self.hir.parent_iter(hir_id))

    def is_diagnostic_item(self, name: str, def_id: DefId) -> bool:
        return self._diagnostic_items.get(name) == def_id

    def trait_of_item(self, def_id: DefId) -> Optional[str]:
        """Return the path of the trait the given associated item is declared in."""
        if (info := self.def_info(def_id)) is None:
            return None
        return info.trait_path

    def is_deref_mut_trait(self, trait_path: Optional[str]) -> bool:
        return trait_path is not None and trait_path in self._deref_mut_traits

    def fn_sig(self, def_id: Optional[DefId]) -> Optional[FnSig]:
        if (info := self.def_info(def_id)) is None:
            return None
        return info.sig

    def body_owner_sig(self, body_id: Optional[BodyId]) -> Optional[FnSig]:
        """Return the signature of the function or closure owning the body."""
        if body_id is None or (body := self.body(body_id)) is None:
            return None
        owner = body.owner
        if isinstance(owner, (Item, ClosureExpr)):
            return self.fn_sig(owner.def_id)
        return None

    def variant_fields(self, def_id: Optional[DefId]) -> Optional[Dict[str, Ty]]:
        """Return the field types of the struct or enum variant."""
        if (info := self.def_info(def_id)) is None or info.kind not in (DefKind.struct, DefKind.variant):
            return None
        return info.fields

    def expr_sig(self, expr: Expr) -> Optional[ExprSig]:
        """Return the signature of the callee expression of a call, if it can be determined."""
        if isinstance(expr, PathExpr) and (info := self.def_info(expr.def_id)) is not None and info.kind.is_fn_like:
            return ExprSig(info.sig) if info.sig is not None else None
        ty, _ = peel_refs(self.typeck.expr_ty_adjusted(expr))
        if isinstance(ty, FnDef) and (sig := self.fn_sig(ty.def_id)) is not None:
            return ExprSig(sig)
        if isinstance(ty, Closure) and (info := self.def_info(ty.def_id)) is not None and info.sig is not None:
            return ExprSig(info.sig, info.decl)
        if isinstance(ty, FnPtr):
            return ExprSig(FnSig(ty.inputs, ty.output))
        logging.debug(f"no signature known for callee {expr!r} of type {ty}")
        return None
