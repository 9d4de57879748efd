"""Module defining the expression nodes of the typed intermediate representation.

expression  <-  literal | path | unary | addr-of | call | method-call | field | index | binary
              | cast | block | loop | break | continue | if | match | assign | assign-op
              | return | struct | tuple | array | closure | range | error

The type of each expression, and the implicit adjustments applied to it, are not stored in the
nodes; they are looked up in the TypeckResults of the crate.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Iterator, List, Optional, TypeVar

from .hir_ty import HirTy
from .nodes import Block, Body, DefId, FnDecl, HirId, HirNode
from .precedence import PREC_ASSIGN, PREC_CAST, PREC_CLOSURE, PREC_JUMP, PREC_PAREN, PREC_POSTFIX, PREC_PREFIX, PREC_RANGE, BinOpKind
from .ty import Mutability

if TYPE_CHECKING:
    from autoderef.structures.visitors.interfaces import HirVisitorInterface

    from .nodes import Arm

T = TypeVar("T")


class Expr(HirNode):
    """Base class for all expressions."""

    def __iter__(self) -> Iterator[HirNode]:
        yield from []

    def precedence(self) -> int:
        """Return how tightly the expression binds its operands when printed."""
        return PREC_PAREN


class Lit(Expr):
    def __init__(self, hir_id: HirId, text: str):
        super().__init__(hir_id)
        self.text = text

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_lit(self)


class PathExpr(Expr):
    """A path resolving either to a local binding or to a definition."""

    def __init__(self, hir_id: HirId, name: str, local_id: Optional[HirId] = None, def_id: Optional[DefId] = None):
        super().__init__(hir_id)
        self.name = name
        self.local_id = local_id
        self.def_id = def_id

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_path(self)


class UnOp(Enum):
    deref = "*"
    not_ = "!"
    neg = "-"


class Unary(Expr):
    def __init__(self, hir_id: HirId, op: UnOp, operand: Expr):
        super().__init__(hir_id)
        self.op = op
        self.operand = operand

    def __iter__(self) -> Iterator[HirNode]:
        yield self.operand

    def precedence(self) -> int:
        return PREC_PREFIX

    @property
    def is_deref(self) -> bool:
        return self.op is UnOp.deref

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_unary(self)


class AddrOf(Expr):
    """A borrow expression, `&e` or `&mut e`. Raw borrows (`&raw const e`) set raw."""

    def __init__(self, hir_id: HirId, mutability: Mutability, operand: Expr, raw: bool = False):
        super().__init__(hir_id)
        self.mutability = mutability
        self.operand = operand
        self.raw = raw

    def __iter__(self) -> Iterator[HirNode]:
        yield self.operand

    def precedence(self) -> int:
        return PREC_PREFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_addr_of(self)


class Call(Expr):
    def __init__(self, hir_id: HirId, func: Expr, args: List[Expr]):
        super().__init__(hir_id)
        self.func = func
        self.args = args

    def __iter__(self) -> Iterator[HirNode]:
        yield self.func
        yield from self.args

    def precedence(self) -> int:
        return PREC_POSTFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_call(self)


class MethodCall(Expr):
    """A method call `receiver.name(args)`. The receiver is not part of args."""

    def __init__(self, hir_id: HirId, name: str, receiver: Expr, args: List[Expr]):
        super().__init__(hir_id)
        self.name = name
        self.receiver = receiver
        self.args = args

    def __iter__(self) -> Iterator[HirNode]:
        yield self.receiver
        yield from self.args

    def precedence(self) -> int:
        return PREC_POSTFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_method_call(self)


class Field(Expr):
    def __init__(self, hir_id: HirId, base: Expr, name: str):
        super().__init__(hir_id)
        self.base = base
        self.name = name

    def __iter__(self) -> Iterator[HirNode]:
        yield self.base

    def precedence(self) -> int:
        return PREC_POSTFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_field(self)


class Index(Expr):
    def __init__(self, hir_id: HirId, base: Expr, index: Expr):
        super().__init__(hir_id)
        self.base = base
        self.index = index

    def __iter__(self) -> Iterator[HirNode]:
        yield self.base
        yield self.index

    def precedence(self) -> int:
        return PREC_POSTFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_index(self)


class Binary(Expr):
    def __init__(self, hir_id: HirId, op: BinOpKind, lhs: Expr, rhs: Expr):
        super().__init__(hir_id)
        self.op = op
        self.lhs = lhs
        self.rhs = rhs

    def __iter__(self) -> Iterator[HirNode]:
        yield self.lhs
        yield self.rhs

    def precedence(self) -> int:
        return self.op.precedence

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_binary(self)


class Cast(Expr):
    def __init__(self, hir_id: HirId, operand: Expr, ty: HirTy):
        super().__init__(hir_id)
        self.operand = operand
        self.ty = ty

    def __iter__(self) -> Iterator[HirNode]:
        yield self.operand

    def precedence(self) -> int:
        return PREC_CAST

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_cast(self)


class BlockExpr(Expr):
    def __init__(self, hir_id: HirId, block: Block, label: Optional[str] = None):
        super().__init__(hir_id)
        self.block = block
        self.label = label

    def __iter__(self) -> Iterator[HirNode]:
        yield self.block

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_block_expr(self)


class Loop(Expr):
    def __init__(self, hir_id: HirId, block: Block, label: Optional[str] = None):
        super().__init__(hir_id)
        self.block = block
        self.label = label

    def __iter__(self) -> Iterator[HirNode]:
        yield self.block

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_loop(self)


class Break(Expr):
    """A break out of a loop or labeled block. target_id is None when the destination could not be resolved."""

    def __init__(self, hir_id: HirId, target_id: Optional[HirId], value: Optional[Expr] = None, label: Optional[str] = None):
        super().__init__(hir_id)
        self.target_id = target_id
        self.value = value
        self.label = label

    def __iter__(self) -> Iterator[HirNode]:
        if self.value is not None:
            yield self.value

    def precedence(self) -> int:
        return PREC_JUMP

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_break(self)


class Continue(Expr):
    def __init__(self, hir_id: HirId, label: Optional[str] = None):
        super().__init__(hir_id)
        self.label = label

    def precedence(self) -> int:
        return PREC_JUMP

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_continue(self)


class If(Expr):
    def __init__(self, hir_id: HirId, cond: Expr, then: Expr, els: Optional[Expr] = None):
        super().__init__(hir_id)
        self.cond = cond
        self.then = then
        self.els = els

    def __iter__(self) -> Iterator[HirNode]:
        yield self.cond
        yield self.then
        if self.els is not None:
            yield self.els

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_if(self)


class MatchSource(Enum):
    """Whether a match was written by the user or desugared from another construct."""

    normal = auto()
    try_desugar = auto()
    await_desugar = auto()


class Match(Expr):
    def __init__(self, hir_id: HirId, scrutinee: Expr, arms: List[Arm], source: MatchSource = MatchSource.normal):
        super().__init__(hir_id)
        self.scrutinee = scrutinee
        self.arms = arms
        self.source = source

    def __iter__(self) -> Iterator[HirNode]:
        yield self.scrutinee
        yield from self.arms

    def precedence(self) -> int:
        # `e?` and `e.await` are postfix operators in the source
        if self.source is MatchSource.normal:
            return PREC_PAREN
        return PREC_POSTFIX

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_match(self)


class Assign(Expr):
    def __init__(self, hir_id: HirId, lhs: Expr, rhs: Expr):
        super().__init__(hir_id)
        self.lhs = lhs
        self.rhs = rhs

    def __iter__(self) -> Iterator[HirNode]:
        yield self.lhs
        yield self.rhs

    def precedence(self) -> int:
        return PREC_ASSIGN

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_assign(self)


class AssignOp(Expr):
    def __init__(self, hir_id: HirId, op: BinOpKind, lhs: Expr, rhs: Expr):
        super().__init__(hir_id)
        self.op = op
        self.lhs = lhs
        self.rhs = rhs

    def __iter__(self) -> Iterator[HirNode]:
        yield self.lhs
        yield self.rhs

    def precedence(self) -> int:
        return PREC_ASSIGN

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_assign_op(self)


class Ret(Expr):
    def __init__(self, hir_id: HirId, value: Optional[Expr] = None):
        super().__init__(hir_id)
        self.value = value

    def __iter__(self) -> Iterator[HirNode]:
        if self.value is not None:
            yield self.value

    def precedence(self) -> int:
        return PREC_JUMP

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_ret(self)


@dataclass(eq=False)
class ExprField:
    """A `name: expr` entry of a struct literal."""

    name: str
    expr: Expr


class Struct(Expr):
    """A struct literal. def_id refers to the struct or enum variant being constructed."""

    def __init__(self, hir_id: HirId, name: str, def_id: Optional[DefId], fields: List[ExprField]):
        super().__init__(hir_id)
        self.name = name
        self.def_id = def_id
        self.fields = fields

    def __iter__(self) -> Iterator[HirNode]:
        for expr_field in self.fields:
            yield expr_field.expr

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_struct(self)


class TupExpr(Expr):
    def __init__(self, hir_id: HirId, items: List[Expr]):
        super().__init__(hir_id)
        self.items = items

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.items

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_tup(self)


class ArrayExpr(Expr):
    def __init__(self, hir_id: HirId, items: List[Expr]):
        super().__init__(hir_id)
        self.items = items

    def __iter__(self) -> Iterator[HirNode]:
        yield from self.items

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_array(self)


class ClosureExpr(Expr):
    """A closure. Its body is a separate Body which is traversed as a nested body."""

    def __init__(self, hir_id: HirId, def_id: DefId, decl: FnDecl):
        super().__init__(hir_id)
        self.def_id = def_id
        self.decl = decl
        self.body: Optional[Body] = None

    def __iter__(self) -> Iterator[HirNode]:
        if self.body is not None:
            yield from self.body.params
            yield self.body.value

    def precedence(self) -> int:
        return PREC_CLOSURE

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_closure(self)


class Range(Expr):
    def __init__(self, hir_id: HirId, start: Optional[Expr], end: Optional[Expr], inclusive: bool = False):
        super().__init__(hir_id)
        self.start = start
        self.end = end
        self.inclusive = inclusive

    def __iter__(self) -> Iterator[HirNode]:
        if self.start is not None:
            yield self.start
        if self.end is not None:
            yield self.end

    def precedence(self) -> int:
        return PREC_RANGE

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_range(self)


class ErrExpr(Expr):
    """An expression which failed to type check."""

    def accept(self, visitor: HirVisitorInterface[T]) -> T:
        return visitor.visit_err(self)


def path_to_local(expr: Expr) -> Optional[HirId]:
    """Return the binding an expression refers to, if it is a path to a local binding."""
    if isinstance(expr, PathExpr):
        return expr.local_id
    return None
