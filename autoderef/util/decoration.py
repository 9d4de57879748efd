"""Module in charge of printing findings, optionally with highlighted source snippets."""
from __future__ import annotations

from logging import warning
from sys import stdout
from typing import Iterable, List, Optional, TextIO

from pygments import highlight
from pygments.formatters.terminal256 import Terminal256Formatter
from pygments.lexers.rust import RustLexer
from pygments.util import ClassNotFound

from autoderef.diagnostics.diagnostic import Applicability, Diagnostic
from autoderef.structures.source_map import SourceMap

SNIPPET_PREFIX = "   | "
REVIEW_NOTE = "   = note: this suggestion is less reliable than configured and needs manual review"


class DecoratedDiagnostics:
    """Renders findings as text, highlighting the quoted source with pygments."""

    def __init__(
        self,
        diagnostics: Iterable[Diagnostic],
        source_map: Optional[SourceMap] = None,
        min_applicability: Applicability = Applicability.UNSPECIFIED,
        style: str = "paraiso-dark",
    ):
        self._diagnostics: List[Diagnostic] = list(diagnostics)
        self._source_map = source_map
        self._min_applicability = min_applicability
        self._style = style

    @classmethod
    def print_findings(
        cls,
        diagnostics: Iterable[Diagnostic],
        source_map: Optional[SourceMap] = None,
        output_stream: TextIO = None,
        color: bool = True,
        min_applicability: Applicability = Applicability.UNSPECIFIED,
        style: str = "paraiso-dark",
    ):
        """Classmethod for quick pretty printing to the commandline."""
        decoration = cls(diagnostics, source_map, min_applicability, style)
        if not output_stream:
            output_stream = stdout
        output_stream.write(decoration.export_ascii() if color else decoration.export_plain())

    def _render(self, diagnostic: Diagnostic) -> str:
        text = diagnostic.render(self._source_map)
        if any(suggestion.applicability < self._min_applicability for suggestion in diagnostic.suggestions):
            text += "\n" + REVIEW_NOTE
        return text

    def export_plain(self) -> str:
        return "".join(f"{self._render(diagnostic)}\n\n" for diagnostic in self._diagnostics)

    def export_ascii(self) -> str:
        """Render all findings with the quoted source highlighted for 256 color terminals."""
        try:
            formatter = Terminal256Formatter(style=self._style)
        except ClassNotFound:
            warning(f"Unknown pygments style {self._style}, falling back to the default style")
            formatter = Terminal256Formatter()
        lexer = RustLexer()
        lines = []
        for line in self.export_plain().splitlines():
            if line.startswith(SNIPPET_PREFIX):
                line = SNIPPET_PREFIX + highlight(line[len(SNIPPET_PREFIX) :], lexer, formatter).rstrip("\n")
            lines.append(line)
        return "\n".join(lines) + "\n"
