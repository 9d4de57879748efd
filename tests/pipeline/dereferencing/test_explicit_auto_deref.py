"""Tests for dereferences auto-deref would insert by itself."""
import pytest
from autoderef.diagnostics.lints import Lint
from autoderef.pipeline.dereferencing.suggestions import EXPLICIT_DEREF_MESSAGE
from autoderef.structures.crate import DefKind


def test_deref_of_string_in_typed_let(builder, lint):
    """let y: &str = &*s;"""
    s, y = builder.bind("s", "String"), builder.bind("y", "&str")
    init = builder.addr_of(builder.deref(builder.local(s), "str"))
    builder.fn("main", [(s, "String")], builder.block([builder.let(y, init, "&str")]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.EXPLICIT_AUTO_DEREF
    assert finding.message == EXPLICIT_DEREF_MESSAGE
    assert crate.source_map.snippet_opt(finding.span) == "*s"
    assert "let y: &str = &s;" in finding.suggestion.apply(crate.source_map.text)


def test_reference_passed_through_drops_whole_borrow(builder, lint):
    """let y: &str = &**x; with x: &String becomes let y: &str = x;"""
    x, y = builder.bind("x", "&String"), builder.bind("y", "&str")
    init = builder.addr_of(builder.deref(builder.deref(builder.local(x)), "str"))
    builder.fn("main", [(x, "&String")], builder.block([builder.let(y, init, "&str")]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert crate.source_map.snippet_opt(finding.span) == "&**x"
    assert "let y: &str = x;" in finding.suggestion.apply(crate.source_map.text)


def test_reborrow_is_not_reported(builder, lint):
    """let y: &String = &*x; only reborrows x."""
    x, y = builder.bind("x", "&String"), builder.bind("y", "&String")
    init = builder.addr_of(builder.deref(builder.local(x)))
    builder.fn("main", [(x, "&String")], builder.block([builder.let(y, init, "&String")]))
    assert lint(builder.finish()).diagnostics == []


@pytest.mark.parametrize("written_ty", ["&_", "&Box<_>", None])
def test_inferred_binding_type_is_unstable(builder, lint, written_ty):
    s, y = builder.bind("s", "String"), builder.bind("y", "&str")
    init = builder.addr_of(builder.deref(builder.local(s), "str"))
    builder.fn("main", [(s, "String")], builder.block([builder.let(y, init, written_ty)]))
    assert lint(builder.finish()).diagnostics == []


@pytest.mark.parametrize(
    "inputs, generics, expected",
    [
        (["&str"], [], 1),
        (["&T"], ["T"], 0),
        (["&dyn Display"], [], 0),
    ],
)
def test_call_argument(builder, lint, inputs, generics, expected):
    """takes(&*s) is only linted if the parameter type does not depend on the argument."""
    takes = builder.fn_def("takes", inputs, generics=generics)
    s = builder.bind("s", "String")
    arg = builder.addr_of(builder.deref(builder.local(s), "str"))
    builder.fn("main", [(s, "String")], builder.block([builder.stmt(builder.call(builder.path("takes", takes), [arg]))]))
    crate = builder.finish()
    findings = lint(crate).diagnostics
    assert len(findings) == expected
    if expected:
        assert "takes(&s);" in findings[0].suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize("written_ty, expected", [("&str", 1), (None, 0)])
def test_closure_parameter(builder, lint, written_ty, expected):
    """c(&*s) is only linted if the closure parameter type is written out, it is inferred from the call otherwise."""
    s = builder.bind("s", "String")
    closure = builder.closure([(builder.bind("v", "&str"), written_ty)], builder.lit("()", "()"))
    c = builder.bind("c", builder.type_of(closure))
    call = builder.call(builder.local(c), [builder.addr_of(builder.deref(builder.local(s), "str"))], "()")
    builder.fn("main", [(s, "String")], builder.block([builder.let(c, closure), builder.stmt(call)]))
    findings = lint(builder.finish()).diagnostics
    assert len(findings) == expected
    assert all(finding.lint is Lint.EXPLICIT_AUTO_DEREF for finding in findings)


@pytest.mark.parametrize("field_ty, generics, expected", [("&str", [], 1), ("&T", ["T"], 0)])
def test_struct_field(builder, lint, field_ty, generics, expected):
    wrapper = builder.struct_def("Wrapper", {"inner": field_ty}, generics)
    s = builder.bind("s", "String")
    value = builder.struct("Wrapper", {"inner": builder.addr_of(builder.deref(builder.local(s), "str"))}, wrapper)
    builder.fn("main", [(s, "String")], builder.block([builder.stmt(value)]))
    crate = builder.finish()
    findings = lint(crate).diagnostics
    assert len(findings) == expected
    if expected:
        assert "Wrapper { inner: &s }" in findings[0].suggestion.apply(crate.source_map.text)


def test_method_argument(builder, lint):
    """buf.push_str(&*s) where the argument is not the receiver."""
    push_str = builder.fn_def("String::push_str", ["&mut String", "&str"], kind=DefKind.assoc_fn)
    buf, s = builder.bind("buf", "String"), builder.bind("s", "String")
    call = builder.method_call("push_str", builder.local(buf), [builder.addr_of(builder.deref(builder.local(s), "str"))], push_str)
    builder.fn("main", [(buf, "String"), (s, "String")], builder.block([builder.stmt(call)]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert "buf.push_str(&s);" in finding.suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize("output, expected", [("&str", 1), ("impl AsRef<str>", 0)])
def test_returned_through_block(builder, lint, output, expected):
    """fn name(s: &String) -> &str { &**s }"""
    s = builder.bind("s", "&String")
    value = builder.addr_of(builder.deref(builder.deref(builder.local(s)), "str"))
    builder.fn("name", [(s, "&String")], builder.block([], value), output=output)
    crate = builder.finish()
    findings = lint(crate, "name").diagnostics
    assert len(findings) == expected
    if expected:
        assert crate.source_map.snippet_opt(findings[0].span) == "&**s"
        assert findings[0].suggestion.edits[0][1] == "s"


def test_raw_pointer_deref_is_ignored(builder, lint):
    """let y: &u32 = &*p; with p: *const u32 is not a reference operation."""
    p, y = builder.bind("p", "*const u32"), builder.bind("y", "&u32")
    init = builder.addr_of(builder.deref(builder.local(p)))
    builder.fn("main", [(p, "*const u32")], builder.block([builder.let(y, init, "&u32")]))
    assert lint(builder.finish()).diagnostics == []
