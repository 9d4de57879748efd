import pytest
from autoderef.diagnostics.diagnostic import Applicability, Diagnostic, Suggestion
from autoderef.diagnostics.lints import Lint, LintGroup
from autoderef.diagnostics.sink import DiagnosticSink
from autoderef.structures.hir.span import Span
from autoderef.structures.source_map import SourceMap


def make_diagnostic(lint=Lint.NEEDLESS_BORROW, hir_id=1):
    suggestion = Suggestion("change this to", [(Span(4, 6), "y")])
    return Diagnostic(lint, hir_id, [Span(4, 6)], "this expression creates a reference which is immediately dereferenced by the compiler", [suggestion])


@pytest.mark.parametrize(
    "name, lint",
    [
        ("needless_borrow", Lint.NEEDLESS_BORROW),
        ("clippy::explicit_auto_deref", Lint.EXPLICIT_AUTO_DEREF),
        (" Ref_Binding_To_Reference ", Lint.REF_BINDING_TO_REFERENCE),
        ("clippy::needless_return", None),
    ],
)
def test_lint_from_name(name, lint):
    assert Lint.from_name(name) is lint


def test_lint_groups():
    assert Lint.NEEDLESS_BORROW.group is LintGroup.style
    assert Lint.EXPLICIT_AUTO_DEREF.group is LintGroup.complexity
    assert Lint.EXPLICIT_DEREF_METHODS.group is LintGroup.pedantic
    assert all(lint.description for lint in Lint)


class TestApplicability:
    def test_from_name(self):
        assert Applicability.from_name("machine-applicable") is Applicability.MACHINE_APPLICABLE
        assert Applicability.from_name("maybe_incorrect") is Applicability.MAYBE_INCORRECT
        with pytest.raises(KeyError):
            Applicability.from_name("sure")

    def test_downgrade_keeps_weaker(self):
        assert Applicability.MACHINE_APPLICABLE.downgrade(Applicability.MAYBE_INCORRECT) is Applicability.MAYBE_INCORRECT
        assert Applicability.HAS_PLACEHOLDERS.downgrade(Applicability.MACHINE_APPLICABLE) is Applicability.HAS_PLACEHOLDERS


def test_suggestion_applies_all_edits():
    text = "match x { Some(ref y) => *y, _ => 0 }"
    suggestion = Suggestion("try", [(Span(15, 20), "y"), (Span(25, 27), "y")])
    assert suggestion.apply(text) == "match x { Some(y) => y, _ => 0 }"


def test_render():
    source_map = SourceMap("fun(&y);")
    rendered = make_diagnostic().render(source_map).splitlines()
    assert rendered == [
        "warning: this expression creates a reference which is immediately dereferenced by the compiler",
        "  --> 1:5",
        "   | &y",
        "   = help: change this to: `y` (machine_applicable)",
        "   = note: `#[warn(clippy::needless_borrow)]` (style)",
    ]


def test_render_without_source():
    assert "  --> 4..6" in str(make_diagnostic())


class TestSink:
    def test_findings(self):
        sink = DiagnosticSink()
        sink.emit(make_diagnostic())
        sink.extend([make_diagnostic(Lint.EXPLICIT_AUTO_DEREF, 2), make_diagnostic(hir_id=3)])
        assert len(sink) == 3
        assert [diagnostic.hir_id for diagnostic in sink.findings(Lint.NEEDLESS_BORROW)] == [1, 3]
        assert len(sink.findings()) == 3

    def test_clear(self):
        sink = DiagnosticSink()
        sink.emit(make_diagnostic())
        sink.clear()
        assert list(sink) == []
