import logging
from io import StringIO

import pytest
from autoderef.diagnostics.diagnostic import Applicability, Diagnostic, Suggestion
from autoderef.diagnostics.lints import Lint
from autoderef.structures.hir.span import Span
from autoderef.structures.source_map import SourceMap
from autoderef.util.decoration import REVIEW_NOTE, DecoratedDiagnostics


class TestDecoratedDiagnostics:
    @pytest.fixture
    def findings(self):
        """Two findings on `fun(&y); let z: &str = &*s;`, the second one only maybe correct."""
        source_map = SourceMap("fun(&y); let z: &str = &*s;")
        borrow = Diagnostic(Lint.NEEDLESS_BORROW, 1, [Span(4, 6)], "needless borrow", [Suggestion("change this to", [(Span(4, 6), "y")])])
        deref = Diagnostic(
            Lint.EXPLICIT_AUTO_DEREF,
            2,
            [Span(23, 26)],
            "deref which would be done by auto-deref",
            [Suggestion("try this", [(Span(23, 26), "&s")], Applicability.MAYBE_INCORRECT)],
        )
        return [borrow, deref], source_map

    def test_plain(self, findings):
        diagnostics, source_map = findings
        output = StringIO()
        DecoratedDiagnostics.print_findings(diagnostics, source_map, output, color=False)
        text = output.getvalue()
        assert text.startswith("warning: needless borrow\n  --> 1:5\n   | &y\n")
        assert "   | &*s\n" in text
        assert text.count("warning: ") == 2
        assert REVIEW_NOTE not in text
        assert "\x1b[" not in text

    def test_review_note(self, findings):
        diagnostics, source_map = findings
        text = DecoratedDiagnostics(diagnostics, source_map, min_applicability=Applicability.MACHINE_APPLICABLE).export_plain()
        assert text.count(REVIEW_NOTE) == 1
        assert text.index(REVIEW_NOTE) > text.index("deref which would be done by auto-deref")

    def test_ascii_highlights_snippets(self, findings):
        diagnostics, source_map = findings
        text = DecoratedDiagnostics(diagnostics, source_map).export_ascii()
        assert "\x1b[" in text
        assert "warning: needless borrow\n" in text

    def test_unknown_style(self, findings, caplog):
        caplog.set_level(logging.WARNING)
        diagnostics, source_map = findings
        text = DecoratedDiagnostics(diagnostics, source_map, style="no-such-style").export_ascii()
        assert "warning: needless borrow" in text
        assert "Unknown pygments style no-such-style" in caplog.text

    def test_no_findings(self):
        assert DecoratedDiagnostics([]).export_plain() == ""
