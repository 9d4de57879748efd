"""
Module defining the non-expression nodes of the typed intermediate representation.

Every node carries a unique HirId. Expressions, patterns, blocks, statements, match arms,
parameters and items are nodes; a Body is not a node itself, its value and parameters are
children of the node owning the body (the item, or the closure expression).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterator, List, Optional, TypeVar

from .hir_ty import HirTy
from .span import DUMMY_SPAN, Span

if TYPE_CHECKING:
    from autoderef.structures.visitors.interfaces import HirVisitorInterface

    from .expressions import Expr
    from .patterns import Pat

T = TypeVar("T")

HirId = int
BodyId = int
DefId = int


class HirNode(ABC):
    """Interface for all nodes of the intermediate representation."""

    def __init__(self, hir_id: HirId):
        self.hir_id = hir_id
        self.span: Span = DUMMY_SPAN
        # Set on the root node of a macro expansion, e.g. "vec" for vec![..]
        self.macro_name: Optional[str] = None
        # Set on nodes passed into a macro, which keep the context of the macro invocation
        self.is_macro_arg: bool = False

    def __eq__(self, other) -> bool:
        return type(other) == type(self) and other.hir_id == self.hir_id

    def __hash__(self) -> int:
        return hash(self.hir_id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}#{self.hir_id}"

    @abstractmethod
    def __iter__(self) -> Iterator[HirNode]:
        """Iterate all directly nested nodes in evaluation order."""

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        """Invoke the appropriate visitor for this node."""
        raise NotImplementedError(f"accept not implemented for {type(self)}")

    def descendants(self) -> Iterator[HirNode]:
        """Yield the node and all nested nodes in pre-order."""
        yield self
        for child in self:
            yield from child.descendants()


class Block(HirNode):
    """A sequence of statements, optionally followed by a tail expression producing the value of the block."""

    def __init__(self, hir_id: HirId, stmts: List[HirNode], expr: Optional[Expr] = None):
        super().__init__(hir_id)
        self.stmts = stmts
        self.expr = expr

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.stmts
        if self.expr is not None:
            yield self.expr

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_block(self)


class Local(HirNode):
    """A let statement. The initializer is visited before the pattern."""

    def __init__(self, hir_id: HirId, pat: Pat, ty: Optional[HirTy] = None, init: Optional[Expr] = None):
        super().__init__(hir_id)
        self.pat = pat
        self.ty = ty
        self.init = init

    def __iter__(self) -> Iterator[HirNode]:
        if self.init is not None:
            yield self.init
        yield self.pat

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_local(self)


class ExprStmt(HirNode):
    """An expression used as a statement, with or without a trailing semicolon."""

    def __init__(self, hir_id: HirId, expr: Expr, semi: bool = True):
        super().__init__(hir_id)
        self.expr = expr
        self.semi = semi

    def __iter__(self) -> Iterator[HirNode]:
        yield self.expr

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_expr_stmt(self)


class Arm(HirNode):
    def __init__(self, hir_id: HirId, pat: Pat, body: Expr, guard: Optional[Expr] = None):
        super().__init__(hir_id)
        self.pat = pat
        self.guard = guard
        self.body = body

    def __iter__(self) -> Iterator[HirNode]:
        yield self.pat
        if self.guard is not None:
            yield self.guard
        yield self.body

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_arm(self)


class Param(HirNode):
    def __init__(self, hir_id: HirId, pat: Pat):
        super().__init__(hir_id)
        self.pat = pat

    def __iter__(self) -> Iterator[HirNode]:
        yield self.pat

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_param(self)


@dataclass
class FnDecl:
    """The written signature of a function or closure. Closure parameters written without a type are HirInfer."""

    inputs: List[HirTy] = field(default_factory=list)
    output: Optional[HirTy] = None


@dataclass(eq=False)
class Body:
    """The executable part of a function, closure, static or const."""

    body_id: BodyId
    owner: HirNode
    params: List[Param]
    value: Expr


class ItemKind(Enum):
    fn = auto()
    static = auto()
    const = auto()


class ItemContainer(Enum):
    """Where an item is declared. Trait and impl items are associated items."""

    free = auto()
    trait = auto()
    impl = auto()


class Item(HirNode):
    """A function, static or const definition owning a body."""

    def __init__(
        self,
        hir_id: HirId,
        def_id: DefId,
        name: str,
        kind: ItemKind,
        container: ItemContainer = ItemContainer.free,
        ty: Optional[HirTy] = None,
        decl: Optional[FnDecl] = None,
    ):
        super().__init__(hir_id)
        self.def_id = def_id
        self.name = name
        self.kind = kind
        self.container = container
        self.ty = ty
        self.decl = decl
        self.body: Optional[Body] = None

    def __iter__(self) -> Iterator[HirNode]:
        if self.body is not None:
            yield from self.body.params
            yield self.body.value

    @property
    def is_fn(self) -> bool:
        return self.kind is ItemKind.fn

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_item(self)
