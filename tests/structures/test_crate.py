import pytest
from autoderef.diagnostics.lints import Lint
from autoderef.structures.crate import DefKind
from autoderef.structures.hir.expressions import BlockExpr, Call
from autoderef.structures.hir.nodes import Block, ExprStmt, Item
from autoderef.structures.hir.ty import Closure, FnPtr, Primitive, Ref, Tup
from autoderef.structures.hirmap import HirMap


@pytest.fixture
def borrow_call(builder):
    """fn main(y: u32) { fun(&y); } returning the crate and the borrow."""
    fun = builder.fn_def("fun", ["&u32"], "u32")
    y = builder.bind("y", "u32")
    borrow = builder.addr_of(builder.local(y))
    builder.fn("main", [(y, "u32")], builder.block([builder.stmt(builder.call(builder.path("fun", fun), [borrow]))]))
    return builder.finish(), borrow


class TestHirMap:
    def test_parent(self, borrow_call):
        crate, borrow = borrow_call
        assert isinstance(crate.hir.parent(borrow.hir_id), Call)
        assert crate.hir.get_parent_expr(borrow.operand.hir_id) is borrow
        assert crate.hir.parent(crate.get_item("main").hir_id) is None

    def test_parent_iter(self, borrow_call):
        crate, borrow = borrow_call
        ancestors = [type(node) for _, node in crate.hir.parent_iter(borrow.hir_id)]
        assert ancestors == [Call, ExprStmt, Block, BlockExpr, Item]

    def test_descendants(self, borrow_call):
        crate, borrow = borrow_call
        assert [node.hir_id for node in crate.hir.iter_descendants(borrow.hir_id)] == [borrow.hir_id, borrow.operand.hir_id]
        assert borrow.hir_id in crate.hir
        assert crate.hir.find(-1) is None

    def test_node_nested_twice(self, builder):
        y = builder.bind("y", "u32")
        shared = builder.local(y)
        hir = HirMap()
        hir.insert_tree(builder.addr_of(shared))
        with pytest.raises(ValueError):
            hir.insert_tree(builder.addr_of(shared))


class TestCrate:
    def test_items_and_bodies(self, borrow_call):
        crate, _ = borrow_call
        assert [item.name for item in crate.items] == ["main"]
        assert crate.get_item("missing") is None
        body = crate.get_item("main").body
        assert list(crate.iter_bodies()) == [body]
        assert crate.body(body.body_id) is body
        assert crate.body_owner_sig(body.body_id).output == Tup()

    def test_closure_bodies_are_registered(self, builder):
        closure = builder.closure([(builder.bind("v", "u32"), "u32")], builder.lit("1"))
        builder.fn("main", [], builder.block([builder.stmt(closure)]))
        crate = builder.finish()
        assert len(list(crate.iter_bodies())) == 2
        assert crate.def_info(closure.def_id).kind is DefKind.closure

    def test_lint_allowed_on_ancestor(self, borrow_call):
        crate, borrow = borrow_call
        crate.allow_lint(crate.get_item("main").hir_id, Lint.NEEDLESS_BORROW)
        assert crate.is_lint_allowed(Lint.NEEDLESS_BORROW, borrow.operand.hir_id)
        assert not crate.is_lint_allowed(Lint.EXPLICIT_AUTO_DEREF, borrow.operand.hir_id)

    def test_deref_items(self, builder):
        deref, deref_mut = builder.deref_method, builder.deref_mut_method
        crate = builder.finish()
        assert crate.is_diagnostic_item("deref_method", deref)
        assert not crate.is_diagnostic_item("deref_method", deref_mut)
        assert crate.is_deref_mut_trait(crate.trait_of_item(deref_mut))
        assert not crate.is_deref_mut_trait(crate.trait_of_item(deref))
        assert crate.def_info(deref).name == "deref"

    def test_expr_sig(self, builder):
        fun = builder.fn_def("fun", ["&u32"], "u32")
        path = builder.path("fun", fun)
        assert builder.crate.expr_sig(path).sig.inputs == (Ref(Primitive("u32")),)
        closure = builder.closure([(builder.bind("v", "u32"), "&u32")], builder.lit("1"))
        sig = builder.crate.expr_sig(closure)
        assert isinstance(builder.type_of(closure), Closure)
        assert str(sig.input_with_hir(0)[0]) == "&u32"
        assert sig.input_with_hir(1) is None
        pointer = builder.local(builder.bind("f", "fn(u8) -> bool"))
        assert builder.crate.expr_sig(pointer).sig.output == Primitive("bool")
        assert isinstance(builder.type_of(pointer), FnPtr)
        assert builder.crate.expr_sig(builder.lit("1")) is None

    def test_variant_fields(self, builder):
        point = builder.struct_def("Point", {"x": "u32"})
        fun = builder.fn_def("fun", [])
        assert builder.crate.variant_fields(point) == {"x": Primitive("u32")}
        assert builder.crate.variant_fields(fun) is None

    def test_call_types_from_signature(self, builder):
        fun = builder.fn_def("fun", ["&u32"], "u32")
        length = builder.fn_def("str::len", ["&str"], "usize", kind=DefKind.assoc_fn)
        s = builder.bind("s", "&str")
        call = builder.call(builder.path("fun", fun), [builder.lit("1", "&u32")])
        method = builder.method_call("len", builder.local(s), def_id=length)
        assert builder.type_of(call) == Primitive("u32")
        assert builder.type_of(method) == Primitive("usize")
        assert builder.type_of(builder.call(builder.path("fun", fun), [], ty="bool")) == Primitive("bool")
