import pytest
from autoderef.diagnostics.diagnostic import Applicability
from autoderef.diagnostics.snippets import has_enclosing_paren, snippet_with_applicability, snippet_with_context
from autoderef.structures.hir.span import ROOT_CONTEXT, Span
from autoderef.structures.source_map import SourceMap


@pytest.fixture
def source_map():
    """let x = show!(a + b); where a + b is passed into the macro expansion."""
    source_map = SourceMap("let x = show!(a + b);")
    source_map.contexts.new_expansion("show", Span(8, 20))
    return source_map


@pytest.mark.parametrize(
    "text, enclosed",
    [("(a + b)", True), ("((a))", True), ("(a) + (b)", False), ("a + (b)", False), ("(a", False), ("", False)],
)
def test_has_enclosing_paren(text, enclosed):
    assert has_enclosing_paren(text) is enclosed


def test_snippet(source_map):
    assert snippet_with_applicability(source_map, Span(0, 5), "..", Applicability.MACHINE_APPLICABLE) == ("let x", Applicability.MACHINE_APPLICABLE)


def test_snippet_default_is_a_placeholder(source_map):
    assert snippet_with_applicability(source_map, Span(3, 3), "..", Applicability.MACHINE_APPLICABLE) == ("..", Applicability.HAS_PLACEHOLDERS)
    assert snippet_with_applicability(source_map, Span(3, 100), "..", Applicability.MAYBE_INCORRECT) == ("..", Applicability.MAYBE_INCORRECT)


def test_expanded_snippet_is_maybe_incorrect(source_map):
    assert snippet_with_applicability(source_map, Span(14, 19, 1), "..", Applicability.MACHINE_APPLICABLE) == ("a + b", Applicability.MAYBE_INCORRECT)
    assert snippet_with_applicability(source_map, Span(14, 19, 1), "..", Applicability.UNSPECIFIED)[1] is Applicability.UNSPECIFIED


def test_snippet_with_context_uses_macro_call(source_map):
    snippet = snippet_with_context(source_map, Span(14, 19, 1), ROOT_CONTEXT, "..", Applicability.MACHINE_APPLICABLE)
    assert snippet.text == "show!(a + b)"
    assert snippet.is_macro_call
    assert snippet.applicability is Applicability.MACHINE_APPLICABLE


def test_snippet_with_context_same_context(source_map):
    snippet = snippet_with_context(source_map, Span(14, 19), ROOT_CONTEXT, "..", Applicability.MACHINE_APPLICABLE)
    assert snippet == ("a + b", False, Applicability.MACHINE_APPLICABLE)


def test_snippet_with_context_outside_expansion(source_map):
    """A span which is not part of the expansion can not be walked into it."""
    snippet = snippet_with_context(source_map, Span(14, 19), 1, "..", Applicability.MACHINE_APPLICABLE)
    assert snippet == ("a + b", False, Applicability.MAYBE_INCORRECT)


def test_line_col():
    source_map = SourceMap("fn main() {\n    a\n}\n")
    assert source_map.line_col(0) == (1, 1)
    assert source_map.line_col(16) == (2, 5)
