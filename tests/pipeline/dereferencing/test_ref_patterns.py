"""Tests for `ref` bindings to references."""
import pytest
from autoderef.diagnostics.lints import Lint
from autoderef.pipeline.dereferencing.ref_patterns import REF_PATTERN_MESSAGE
from autoderef.structures.crate import DefKind


def match_some(builder, binding_ty, arm_body):
    """fn main(x: Option<&u32>) { match x { Some(ref y) => arm_body(y), _ => unreachable!() } }"""
    x = builder.bind("x", "Option<&u32>")
    y = builder.ref_bind("y", binding_ty)
    body = arm_body(y)
    arms = [
        builder.arm(builder.tuple_struct_pat("Some", [y], "Option<&u32>"), body),
        builder.arm(builder.wild("Option<&u32>"), builder.expand(builder.err(), "unreachable")),
    ]
    value = builder.match(builder.local(x), arms)
    builder.fn("main", [(x, "Option<&u32>")], builder.block([], value), output=str(builder.type_of(body)))
    return y


def test_binding_only_dereferenced(builder, lint):
    """Some(ref y) => *y is a needless borrow."""
    match_some(builder, "&&u32", lambda y: builder.deref(builder.local(y)))
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.NEEDLESS_BORROW
    assert finding.message == REF_PATTERN_MESSAGE
    assert crate.source_map.snippet_opt(finding.span) == "ref y"
    assert [text for _, text in finding.suggestion.edits] == ["y", "y"]
    assert "Some(y) => y," in finding.suggestion.apply(crate.source_map.text)


def test_binding_used_as_reference(builder, lint):
    """Some(ref y) => { let z = y; } binds a reference to a reference."""

    def arm_body(y):
        return builder.block([builder.let(builder.bind("z", "&&u32"), builder.local(y))])

    match_some(builder, "&&u32", arm_body)
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.REF_BINDING_TO_REFERENCE
    assert [text for _, text in finding.suggestion.edits] == ["y", "&y"]
    fixed = finding.suggestion.apply(crate.source_map.text)
    assert "Some(y) =>" in fixed
    assert "let z = &y;" in fixed


def test_binding_to_mutable_reference_is_ignored(builder, lint):
    match_some(builder, "&&mut u32", lambda y: builder.deref(builder.deref(builder.local(y))))
    assert lint(builder.finish()).diagnostics == []


def test_postfix_use_is_not_rewritten(builder, lint):
    """Some(ref y) => y.count() would need parentheses around &y."""
    count = builder.fn_def("Counter::count", ["&&u32"], "u32", kind=DefKind.assoc_fn)
    match_some(builder, "&&u32", lambda y: builder.method_call("count", builder.local(y), def_id=count))
    assert lint(builder.finish()).diagnostics == []


def test_auto_dereferenced_use_is_not_rewritten(builder, lint):
    """Some(ref y) => y.count() where auto-deref removes both references anyway."""
    count = builder.fn_def("u32::count_ones", ["u32"], "u32", kind=DefKind.assoc_fn)

    def arm_body(y):
        receiver = builder.auto_deref(builder.local(y), "&u32", "u32")
        return builder.method_call("count_ones", receiver, def_id=count)

    match_some(builder, "&&u32", arm_body)
    [finding] = lint(builder.finish()).diagnostics
    assert finding.lint is Lint.NEEDLESS_BORROW
    assert [text for _, text in finding.suggestion.edits] == ["y"]


def test_disabled_by_configuration(builder, lint):
    match_some(builder, "&&u32", lambda y: builder.deref(builder.local(y)))
    assert lint(builder.finish(), settings={"dereferencing.lint_ref_patterns": False}).diagnostics == []


def or_pattern(builder, expanded_alternative=None):
    """fn main(x: (&u32, &u32)) -> &u32 { match x { (ref y, _) | (_, ref y) => *y } }"""
    x = builder.bind("x", "(&u32, &u32)")
    first = builder.ref_bind("y", "&&u32")
    second = builder.ref_bind("y", binding=first)
    alternatives = [builder.tuple_pat(first, builder.wild("&u32")), builder.tuple_pat(builder.wild("&u32"), second)]
    if expanded_alternative is not None:
        builder.expand(alternatives[expanded_alternative], "alt")
    arm = builder.arm(builder.or_pat(alternatives), builder.deref(builder.local(first)))
    builder.fn("main", [(x, "(&u32, &u32)")], builder.block([], builder.match(builder.local(x), [arm])), output="&u32")


def test_or_pattern_rewrites_every_alternative(builder, lint):
    or_pattern(builder)
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is Lint.NEEDLESS_BORROW
    assert len(finding.spans) == 2
    assert "(y, _) | (_, y) => y," in finding.suggestion.apply(crate.source_map.text)


@pytest.mark.parametrize("expanded_alternative", [0, 1])
def test_or_pattern_from_macro_is_ignored(builder, lint, expanded_alternative):
    or_pattern(builder, expanded_alternative)
    assert lint(builder.finish()).diagnostics == []


@pytest.mark.parametrize(
    "closure_value, lint_name, edits, fixed",
    [
        (lambda b, y: b.deref(b.local(y)), Lint.NEEDLESS_BORROW, ["y", "y"], "let c = || y;"),
        (lambda b, y: b.block([b.let(b.bind("z", "&&u32"), b.local(y))]), Lint.REF_BINDING_TO_REFERENCE, ["y", "&y"], "let z = &y;"),
    ],
)
def test_binding_used_in_closure(builder, lint, closure_value, lint_name, edits, fixed):
    """Some(ref y) => { let c = || *y; } is reported once the body of main is complete, not with the closure body."""

    def arm_body(y):
        closure = builder.closure([], closure_value(builder, y))
        return builder.block([builder.let(builder.bind("c", builder.type_of(closure)), closure)])

    match_some(builder, "&&u32", arm_body)
    crate = builder.finish()
    [finding] = lint(crate).diagnostics
    assert finding.lint is lint_name
    assert crate.source_map.snippet_opt(finding.span) == "ref y"
    assert [text for _, text in finding.suggestion.edits] == edits
    fixed_text = finding.suggestion.apply(crate.source_map.text)
    assert "Some(y) =>" in fixed_text
    assert fixed in fixed_text
