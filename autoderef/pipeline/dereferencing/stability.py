"""
Module deciding how many references a borrow needs at its position, and whether auto-deref at a position is stable.

A position is stable if the type auto-deref produces there does not depend on how many references the
expression has, i.e. removing an explicit borrow or dereference can not change which type is selected.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, NamedTuple, Optional, Sequence, Tuple, TypeVar

from autoderef.structures.crate import Crate
from autoderef.structures.hir.adjustment import Adjustment
from autoderef.structures.hir.expressions import BlockExpr, Break, Call, Expr, If, Match, MethodCall, Ret, Struct
from autoderef.structures.hir.hir_ty import (
    HirArray,
    HirBareFn,
    HirErr,
    HirInfer,
    HirNever,
    HirOpaqueDef,
    HirPath,
    HirPtr,
    HirRef,
    HirSlice,
    HirTraitObject,
    HirTup,
    HirTy,
    HirTypeof,
    peel_hir_ty_refs,
)
from autoderef.structures.hir.nodes import Arm, Block, HirId, HirNode, Item, ItemKind, Local
from autoderef.structures.hir.precedence import PREC_POSTFIX
from autoderef.structures.hir.ty import (
    Adt,
    Array,
    Bound,
    Closure,
    Dynamic,
    Error,
    FnDef,
    FnPtr,
    Foreign,
    Generator,
    Infer,
    Never,
    Opaque,
    Param,
    Placeholder,
    Primitive,
    Projection,
    RawPtr,
    Ref,
    Slice,
    Tup,
    Ty,
    peel_refs,
)

from .positions import is_auto_borrow_position, is_auto_reborrow_position

if TYPE_CHECKING:
    from autoderef.pipeline.context import LintContext

T = TypeVar("T")

DEREF_MESSAGE = "this expression creates a reference which is immediately dereferenced by the compiler"
BORROW_MESSAGE = "this expression borrows a value the compiler would automatically borrow"

STABLE_PARAM_TYS = (Primitive, Foreign, Array, Slice, RawPtr, FnDef, FnPtr, Closure, Generator, Never, Tup, Ref, Projection)
UNSTABLE_PARAM_TYS = (Infer, Error, Param, Bound, Opaque, Placeholder, Dynamic)


class RequiredRefs(NamedTuple):
    """How many references a borrow needs at its position, how tightly its replacement must bind, and why it can go."""

    count: int
    precedence: int
    message: str


def find_adjustments(tcx: Crate, expr: Expr) -> Tuple[Adjustment, ...]:
    """
    Return the adjustments applied to the value of the expression.
    These are sometimes recorded on the enclosing block expression, or on the target of a break, instead.
    """
    parents = tcx.hir.parent_iter(expr.hir_id)
    current = expr
    while not (adjustments := tcx.typeck.expr_adjustments(current)):
        _, parent = next(parents, (None, None))
        if isinstance(parent, Block):
            _, owner = next(parents, (None, None))
            if not isinstance(owner, Expr):
                logging.debug(f"block {parent!r} is not contained in an expression")
                return ()
            current = owner
        elif isinstance(parent, Break) and parent.target_id is not None:
            if not isinstance(target := tcx.hir.find(parent.target_id), Expr):
                logging.debug(f"target of {parent!r} can not be resolved")
                return ()
            current = target
            parents = tcx.hir.parent_iter(target.hir_id)
        else:
            return ()
    return adjustments


def count_implicit_derefs(adjustments: Sequence[Adjustment]) -> Tuple[int, Optional[Adjustment]]:
    """
    Count the leading dereferences of the adjustments, returning the count and the adjustment following them.
    A dereference producing something other than a reference ends the count.
    """
    count = 0
    for index, adjustment in enumerate(adjustments):
        if not adjustment.is_deref:
            return count, adjustment
        count += 1
        if not adjustment.target.is_ref:
            return count, adjustments[index + 1] if index + 1 < len(adjustments) else None
    return count, None


def required_references(parent: Optional[HirNode], child_id: HirId, deref_count: int, next_adjustment: Optional[Adjustment]) -> RequiredRefs:
    """
    Determine how many references a borrow needs before any of them can be removed. The borrow itself is always removed.

    1. The compiler borrows at this position, so no further references are required.
    2. Auto-deref ends at a reference or the underlying type, so one more is needed for the reborrow the compiler inserts.
    3. Auto-deref ends in a mutable reborrow at a position the compiler does not reborrow at, so one more is needed
       to avoid moving the mutable reference, e.g. `Some(x) => &mut *x` in a match on `&mut Option<&mut T>`.
    """
    if is_auto_borrow_position(parent, child_id):
        return RequiredRefs(1, PREC_POSTFIX, BORROW_MESSAGE if deref_count == 1 else DEREF_MESSAGE)
    if next_adjustment is not None and next_adjustment.is_mut_ref_borrow and not is_auto_reborrow_position(parent):
        return RequiredRefs(3, 0, DEREF_MESSAGE)
    return RequiredRefs(2, 0, DEREF_MESSAGE)


def walk_to_expr_usage(tcx: Crate, expr: Expr, f: Callable[[HirNode, HirId], Optional[T]]) -> Optional[T]:
    """
    Walk up from the expression to the node using its value, calling f on every parent with the id of the child walked from.
    Blocks, if and match branches, and breaks, which continue at their target, pass the value through.
    Returns the first result of f which is not None.
    """
    child_id = expr.hir_id
    parents = tcx.hir.parent_iter(child_id)
    while (entry := next(parents, None)) is not None:
        parent_id, parent = entry
        if (result := f(parent, child_id)) is not None:
            return result
        if isinstance(parent, Block) and parent.expr is not None and parent.expr.hir_id == child_id:
            child_id = parent_id
        elif isinstance(parent, Arm) and parent.body.hir_id == child_id:
            child_id = parent_id
        elif isinstance(parent, If) and parent.cond.hir_id != child_id:
            child_id = parent_id
        elif isinstance(parent, Match) and parent.scrutinee.hir_id != child_id:
            child_id = parent_id
        elif isinstance(parent, Break) and parent.target_id is not None:
            child_id = parent.target_id
            parents = tcx.hir.parent_iter(child_id)
        elif isinstance(parent, BlockExpr):
            child_id = parent_id
        else:
            return None
    return None


def is_stable_auto_deref_position(cx: LintContext, expr: Expr) -> bool:
    """
    Check whether auto-deref applies at the position of the expression and always selects the same type.
    The target type must not be inferred, e.g. neither `let x: &_ = &*s;` nor `fn f<T>(_: &T)` called as `f(&*s)` qualify.
    """
    return walk_to_expr_usage(cx.tcx, expr, lambda node, child_id: _usage_stability(cx, node, child_id)) or False


def _usage_stability(cx: LintContext, node: HirNode, child_id: HirId) -> Optional[bool]:
    tcx = cx.tcx
    if isinstance(node, Local):
        return is_binding_ty_auto_deref_stable(node.ty) if node.ty is not None else None
    if isinstance(node, Item):
        if node.kind in (ItemKind.static, ItemKind.const):
            return True
        return _is_output_stable(tcx.fn_sig(node.def_id))
    if isinstance(node, Ret):
        return _is_output_stable(tcx.body_owner_sig(cx.enclosing_body))
    if isinstance(node, Call):
        return _is_call_arg_stable(tcx, node, child_id)
    if isinstance(node, MethodCall):
        return _is_method_arg_stable(tcx, node, child_id)
    if isinstance(node, Struct):
        return _is_struct_field_stable(tcx, node, child_id)
    return None


def _is_output_stable(sig) -> bool:
    if sig is None:
        return False
    return not (sig.output.has_placeholders() or sig.output.has_opaque_types())


def _position(args: Sequence[Expr], child_id: HirId) -> Optional[int]:
    for index, arg in enumerate(args):
        if arg.hir_id == child_id:
            return index
    return None


def _is_call_arg_stable(tcx: Crate, call: Call, child_id: HirId) -> bool:
    if (index := _position(call.args, child_id)) is None or (sig := tcx.expr_sig(call.func)) is None:
        return False
    if (param := sig.input_with_hir(index)) is None:
        return False
    hir_ty, ty = param
    # closure parameter types can be inferred from how the closure is called, so only trust written types
    if hir_ty is not None:
        return is_binding_ty_auto_deref_stable(hir_ty)
    return is_param_auto_deref_stable(ty)


def _is_method_arg_stable(tcx: Crate, call: MethodCall, child_id: HirId) -> bool:
    if (def_id := tcx.typeck.type_dependent_def_id(call.hir_id)) is None:
        logging.debug(f"method call {call!r} was not resolved")
        return False
    if (index := _position(call.args, child_id)) is None or (sig := tcx.fn_sig(def_id)) is None:
        return False
    # the receiver is the first input of the signature
    if index + 1 >= len(sig.inputs):
        return False
    return is_param_auto_deref_stable(sig.inputs[index + 1])


def _is_struct_field_stable(tcx: Crate, struct: Struct, child_id: HirId) -> bool:
    if (fields := tcx.variant_fields(struct.def_id)) is None:
        return False
    for expr_field in struct.fields:
        if expr_field.expr.hir_id == child_id and (field_ty := fields.get(expr_field.name)) is not None:
            return is_param_auto_deref_stable(field_ty)
    return False


def is_binding_ty_auto_deref_stable(ty: HirTy) -> bool:
    """
    Check whether auto-dereferencing any type into a binding of the given written type will produce the same result.

    e.g. with `let x = Box::new(Box::new(0u32));`, `let y1: &Box<_> = x.deref();` and `let y2: &Box<_> = &x;` resolve
    to different types, so `&Box<_>` is not stable.
    """
    ty, count = peel_hir_ty_refs(ty)
    if count != 1:
        return False
    if isinstance(ty, HirPath):
        return not any(ty_contains_infer(arg) for arg in ty.args)
    if isinstance(ty, (HirSlice, HirArray, HirBareFn, HirNever, HirTup, HirPtr, HirTraitObject)):
        return True
    return False


def ty_contains_infer(ty: HirTy) -> bool:
    """Check whether a written type is inferred at some point, e.g. `_`, `Box<_>` or `[_]`."""
    if isinstance(ty, (HirSlice, HirArray, HirPtr, HirRef)):
        return ty_contains_infer(ty.ty)
    if isinstance(ty, (HirTup, HirBareFn, HirPath)):
        return any(ty_contains_infer(nested) for nested in ty)
    if isinstance(ty, (HirOpaqueDef, HirInfer, HirTypeof, HirErr)):
        return True
    return False


def is_param_auto_deref_stable(ty: Ty) -> bool:
    """Check whether a resolved parameter or field type is stable when switching to auto-deref."""
    ty, count = peel_refs(ty)
    if count != 1:
        return False
    if isinstance(ty, STABLE_PARAM_TYS):
        return True
    if isinstance(ty, UNSTABLE_PARAM_TYS):
        return False
    if isinstance(ty, Adt):
        return not (ty.has_placeholders() or ty.has_param_types())
    logging.warning(f"unexpected type {ty} when checking auto-deref stability")
    return False
