import pytest
from autoderef.pipeline.dereferencing.positions import is_auto_borrow_position, is_auto_reborrow_position
from autoderef.pipeline.dereferencing.stability import (
    BORROW_MESSAGE,
    DEREF_MESSAGE,
    count_implicit_derefs,
    find_adjustments,
    is_binding_ty_auto_deref_stable,
    is_param_auto_deref_stable,
    required_references,
    ty_contains_infer,
)
from autoderef.structures.hir.adjustment import Adjustment
from autoderef.structures.hir.precedence import PREC_POSTFIX
from autoderef.structures.hir.ty import Adt, Mutability, Primitive, Ref
from autoderef.structures.hir.type_parser import TypeParser

U32 = Primitive("u32")


@pytest.mark.parametrize(
    "written, stable",
    [
        ("&str", True),
        ("&String", True),
        ("&Vec<u8>", True),
        ("&[u8]", True),
        ("&[u8; 4]", True),
        ("&(u8, u16)", True),
        ("&fn(u8) -> bool", True),
        ("&dyn Display", True),
        ("&Box<_>", False),
        ("&_", False),
        ("&&str", False),
        ("str", False),
        ("&impl Display", False),
    ],
)
def test_binding_ty_stability(written, stable):
    assert is_binding_ty_auto_deref_stable(TypeParser().parse(written)) is stable


@pytest.mark.parametrize("written, inferred", [("_", True), ("Box<_>", True), ("[_]", True), ("(u8, _)", True), ("Vec<u8>", False), ("&str", False)])
def test_ty_contains_infer(written, inferred):
    assert ty_contains_infer(TypeParser().parse(written)) is inferred


@pytest.mark.parametrize(
    "written, stable",
    [
        ("&u32", True),
        ("&str", True),
        ("&Vec<u8>", True),
        ("&[u8]", True),
        ("&*const u8", True),
        ("&T", False),
        ("&Vec<T>", False),
        ("&dyn Display", False),
        ("&&u32", False),
        ("u32", False),
    ],
)
def test_param_stability(written, stable):
    assert is_param_auto_deref_stable(TypeParser(["T"]).parse_ty(written)) is stable


def test_count_implicit_derefs():
    assert count_implicit_derefs(()) == (0, None)
    borrow = Adjustment.borrow(Ref(U32))
    assert count_implicit_derefs((Adjustment.deref(Ref(U32)), Adjustment.deref(U32), borrow)) == (2, borrow)
    assert count_implicit_derefs((borrow,)) == (0, borrow)
    # a deref to a value ends the count even if more derefs were recorded
    overloaded = Adjustment.deref(Primitive.str(), Mutability.NOT)
    assert count_implicit_derefs((Adjustment.deref(Adt("String")), overloaded)) == (1, overloaded)


def test_required_references(builder):
    s = builder.bind("s", "Point")
    base = builder.addr_of(builder.local(s))
    access = builder.field(base, "x", "u32")
    assert is_auto_borrow_position(access, base.hir_id)
    assert required_references(access, base.hir_id, 1, None) == (1, PREC_POSTFIX, BORROW_MESSAGE)
    assert required_references(access, base.hir_id, 2, None).message == DEREF_MESSAGE
    assert required_references(None, base.hir_id, 2, None).count == 2
    mut_borrow = Adjustment.borrow(Ref(U32, Mutability.MUT), Mutability.MUT)
    assert required_references(access.base, base.hir_id, 2, mut_borrow).count == 3
    assert not is_auto_reborrow_position(access)


def test_find_adjustments_through_blocks(builder):
    y = builder.bind("y", "&u32")
    borrow = builder.addr_of(builder.local(y))
    outer = builder.block([], builder.block([], borrow))
    builder.auto_deref(outer, "&u32")
    builder.fn("main", [(y, "&u32")], builder.block([builder.stmt(outer)]))
    crate = builder.finish()
    assert find_adjustments(crate, borrow) == (Adjustment.deref(Ref(U32)),)
    assert find_adjustments(crate, crate.get_item("main").body.value) == ()
