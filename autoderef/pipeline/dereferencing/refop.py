"""Module classifying expressions as reference operations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from autoderef.structures.crate import Crate
from autoderef.structures.hir.expressions import AddrOf, Call, Expr, MethodCall, PathExpr, Unary
from autoderef.structures.hir.ty import Mutability


class RefOpKind(Enum):
    """Enumerator of all reference operations."""

    method = auto()
    deref = auto()
    addr_of = auto()


@dataclass(frozen=True)
class RefOp:
    """
    A reference operation and the operand it applies to.

    method -- an explicit call of Deref::deref or DerefMut::deref_mut, with the mutability of the called method
    deref -- the dereference operator applied to anything but a raw pointer
    addr_of -- the borrow operator
    """

    kind: RefOpKind
    operand: Expr
    mutability: Optional[Mutability] = None

    @property
    def is_method(self) -> bool:
        return self.kind is RefOpKind.method

    @property
    def is_deref(self) -> bool:
        return self.kind is RefOpKind.deref

    @property
    def is_addr_of(self) -> bool:
        return self.kind is RefOpKind.addr_of


def try_parse_ref_op(tcx: Crate, expr: Expr) -> Optional[RefOp]:
    """Classify the expression as a reference operation, returning None for any other expression."""
    if isinstance(expr, MethodCall) and not expr.args:
        def_id, arg = tcx.typeck.type_dependent_def_id(expr.hir_id), expr.receiver
    elif isinstance(expr, Call) and isinstance(expr.func, PathExpr) and len(expr.args) == 1:
        def_id, arg = expr.func.def_id, expr.args[0]
    elif isinstance(expr, Unary) and expr.is_deref and not tcx.typeck.expr_ty(expr.operand).is_unsafe_ptr:
        return RefOp(RefOpKind.deref, expr.operand)
    elif isinstance(expr, AddrOf) and not expr.raw:
        return RefOp(RefOpKind.addr_of, expr.operand)
    else:
        return None
    if def_id is None:
        return None
    if tcx.is_diagnostic_item("deref_method", def_id):
        return RefOp(RefOpKind.method, arg, Mutability.NOT)
    if tcx.is_deref_mut_trait(tcx.trait_of_item(def_id)):
        return RefOp(RefOpKind.method, arg, Mutability.MUT)
    return None
