"""Tests for explicit calls of Deref::deref and DerefMut::deref_mut."""
import pytest
from autoderef.diagnostics.lints import Lint
from autoderef.structures.crate import DefKind
from autoderef.structures.hir.ty import Mutability


def deref_in_let(builder, param_ty: str, result_ty: str, mutability=Mutability.NOT, ufcs=False):
    """fn main(s: param_ty) { let y: result_ty = s.deref(); }"""
    s, y = builder.bind("s", param_ty), builder.bind("y", result_ty)
    if ufcs:
        init = builder.ufcs_deref(builder.local(s), result_ty, mutability)
    else:
        init = builder.deref_call(builder.local(s), result_ty, mutability)
    builder.fn("main", [(s, param_ty)], builder.block([builder.let(y, init, result_ty)]))
    return init


@pytest.mark.parametrize(
    "param_ty, result_ty, mutability, replacement",
    [
        ("String", "&str", Mutability.NOT, "&*s"),
        ("&String", "&str", Mutability.NOT, "&**s"),
        ("&mut String", "&String", Mutability.NOT, "&*s"),
        ("String", "&mut str", Mutability.MUT, "&mut *s"),
    ],
)
def test_method_call_form(builder, lint, param_ty, result_ty, mutability, replacement):
    deref_in_let(builder, param_ty, result_ty, mutability)
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.EXPLICIT_DEREF_METHODS
    assert finding.suggestion.help == "try this"
    assert [text for _, text in finding.suggestion.edits] == [replacement]
    assert f"let y: {result_ty} = {replacement};" in finding.suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize("mutability, message", [(Mutability.NOT, "explicit `deref` method call"), (Mutability.MUT, "explicit `deref_mut` method call")])
def test_message_names_the_method(builder, lint, mutability, message):
    deref_in_let(builder, "String", "&mut str" if mutability is Mutability.MUT else "&str", mutability)
    [finding] = lint(builder.finish()).diagnostics
    assert finding.message == message


def test_ufcs_form(builder, lint):
    """let y: &str = Deref::deref(s); with s: &String"""
    deref_in_let(builder, "&String", "&str", ufcs=True)
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert crate.source_map.snippet_opt(finding.span) == "Deref::deref(s)"
    assert "let y: &str = &**s;" in finding.suggestion.apply(crate.source_map.text)


def test_ufcs_form_wraps_loose_argument(builder, lint):
    """Deref::deref(s as &String) needs parentheses once the call is gone."""
    s, y = builder.bind("s", "&String"), builder.bind("y", "&str")
    init = builder.ufcs_deref(builder.cast(builder.local(s), "&String"), "&str")
    builder.fn("main", [(s, "&String")], builder.block([builder.let(y, init, "&str")]))
    [finding] = lint(builder.finish()).diagnostics
    assert [text for _, text in finding.suggestion.edits] == ["&**(s as &String)"]


def test_nested_calls_form_one_chain(builder, lint):
    """s.deref().deref() with s: &Box<String> is reported once."""
    s, y = builder.bind("s", "&Box<String>"), builder.bind("y", "&str")
    inner = builder.deref_call(builder.local(s), "&String")
    outer = builder.deref_call(inner, "&str")
    builder.fn("main", [(s, "&Box<String>")], builder.block([builder.let(y, outer, "&str")]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert crate.source_map.snippet_opt(finding.span) == "s.deref().deref()"
    assert [text for _, text in finding.suggestion.edits] == ["&***s"]


def test_receiver_of_method_chain_is_ignored(builder, lint):
    """s.deref().len() is left alone."""
    length = builder.fn_def("str::len", ["&str"], "usize", kind=DefKind.assoc_fn)
    s = builder.bind("s", "String")
    call = builder.method_call("len", builder.deref_call(builder.local(s), "&str"), def_id=length)
    builder.fn("main", [(s, "String")], builder.block([], call), output="usize")
    assert lint(builder.finish()).diagnostics == []


def test_call_inside_macro_expansion_is_ignored(builder, lint):
    init = deref_in_let(builder, "String", "&str")
    builder.expand(init, "wrap")
    crate = builder.finish()
    assert "wrap!()" in crate.source_map.text
    assert lint(crate).diagnostics == []


def test_call_passed_into_macro_is_linted(builder, lint):
    """show!(s.deref()) where the call is written by the user."""
    show = builder.fn_def("show", ["&str"])
    s = builder.bind("s", "String")
    arg = builder.macro_arg(builder.deref_call(builder.local(s), "&str"))
    call = builder.expand(builder.call(builder.path("show", show), [arg]), "show")
    builder.fn("main", [(s, "String")], builder.block([builder.stmt(call)]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert "show!(&*s);" in finding.suggestion.apply(crate.source_map.text)


def test_allowed_at_call(builder, lint):
    init = deref_in_let(builder, "String", "&str")
    builder.allow(init, Lint.EXPLICIT_DEREF_METHODS)
    assert lint(builder.finish()).diagnostics == []


def test_mutable_reference_to_changed_type(builder, lint):
    """
    let b: &str = a.deref(); with a: &mut String

    The call removes the reference and calls the deref implementation of String, so it counts as a type change.
    The general rewrite then gives two dereferences, &**a, and not the shorter &*a, which would compile as well.
    """
    a, b = builder.bind("a", "&mut String"), builder.bind("b", "&str")
    builder.fn("main", [(a, "&mut String")], builder.block([builder.let(b, builder.deref_call(builder.local(a), "&str"), "&str")]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert [text for _, text in finding.suggestion.edits] == ["&**a"]
    assert "let b: &str = &**a;" in finding.suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize("forms", [("method", "method"), ("method", "method", "method"), ("ufcs", "method"), ("method", "ufcs")])
def test_chain_only_changing_mutability(builder, lint, forms):
    """x.deref().deref() with x: &mut String only turns the &mut String into a &String, which needs a single reborrow."""
    x, y = builder.bind("x", "&mut String"), builder.bind("y", "&String")
    value = builder.local(x)
    for form in reversed(forms):
        value = builder.ufcs_deref(value, "&String") if form == "ufcs" else builder.deref_call(value, "&String")
    builder.fn("main", [(x, "&mut String")], builder.block([builder.let(y, value, "&String")]))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.EXPLICIT_DEREF_METHODS
    assert [text for _, text in finding.suggestion.edits] == ["&*x"]
    assert "let y: &String = &*x;" in finding.suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize(
    "param_ty, call_ty, use",
    [
        ("Box<Point>", "&Point", lambda b, call: b.field(call, "x", "u32")),
        ("Vec<u8>", "&[u8]", lambda b, call: b.index(call, b.lit("0", "usize"), "u8")),
        ("Box<u32>", "&u32", lambda b, call: b.deref(call)),
        ("Box<fn(u8) -> bool>", "&fn(u8) -> bool", lambda b, call: b.call(call, [b.lit("1", "u8")], "bool")),
        ("Box<Result<u32, String>>", "&Result<u32, String>", lambda b, call: b.try_(call, "u32")),
        ("Box<Ready>", "&Ready", lambda b, call: b.await_(call, "u32")),
    ],
    ids=["field_base", "index_base", "dereferenced", "callee", "try_scrutinee", "await_scrutinee"],
)
def test_position_is_not_linted(builder, lint, param_ty, call_ty, use):
    """The call is the operand of an expression which can not take the replacement as it is."""
    s = builder.bind("s", param_ty)
    value = use(builder, builder.deref_call(builder.local(s), call_ty))
    ty = builder.type_of(value)
    builder.fn("main", [(s, param_ty)], builder.block([builder.let(builder.bind("y", ty), value, str(ty))]))
    assert lint(builder.finish()).diagnostics == []
